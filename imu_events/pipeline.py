"""Detector pipeline.

Owns one instance of every enabled detector and feeds each sample to all
of them. Detectors stay independent; the pipeline only resolves their
coefficients once from the configuration and collects the results.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .core.config import Config
from .core.types import FallStage, Orientation, SensorSample
from .detectors import (
    DistortionDetectorHP,
    DistortionDetectorLP,
    FallDetector,
    InclineDetector,
    MotionDetectorKalman,
    MotionDetectorLP,
    OrientationEstimatorKalman,
    OrientationEstimatorLP,
)

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Results of all detectors for one sample."""
    seq: int
    timestamp: float
    motion: float = 0.0
    distortion: float = 0.0
    incline: float = 0.0
    fall_stage: Optional[FallStage] = None
    orientation: Optional[Orientation] = None
    events: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "seq": self.seq,
            "timestamp": self.timestamp,
            "motion": self.motion,
            "distortion": self.distortion,
            "incline": self.incline,
            "fall_stage": self.fall_stage.name if self.fall_stage is not None else None,
            "events": list(self.events),
        }
        if self.orientation is not None:
            result.update(self.orientation.to_dict())
        return result


class DetectorPipeline:
    """Runs every enabled detector on each sample."""

    def __init__(self, config: Config):
        """Build detectors from configuration.

        Args:
            config: System configuration.

        Raises:
            ValueError: If a coefficient cannot be derived from the config.
        """
        cfg = config.detectors
        rate = config.sensor.sample_rate_hz
        warmup = cfg.warmup_samples

        self._cfg = cfg
        self.motion = None
        self.distortion = None
        self.orientation = None
        self.incline = None
        self.fall = None

        if cfg.motion.enabled:
            if cfg.motion.method == "kalman":
                self.motion = MotionDetectorKalman(
                    warmup=warmup, max_trigger=cfg.motion.max_trigger_g
                )
            else:
                self.motion = MotionDetectorLP(warmup=warmup)
            self._motion_alpha = cfg.motion.resolve_alpha(rate)

        if cfg.distortion.enabled:
            if cfg.distortion.method == "hp":
                self.distortion = DistortionDetectorHP(warmup=warmup)
            else:
                self.distortion = DistortionDetectorLP(warmup=warmup)
            self._distortion_alpha = cfg.distortion.resolve_alpha(rate)

        if cfg.orientation.enabled:
            if cfg.orientation.method == "kalman":
                self.orientation = OrientationEstimatorKalman(warmup=warmup)
            else:
                self.orientation = OrientationEstimatorLP(warmup=warmup)
            self._orientation_alpha = cfg.orientation.resolve_alpha(rate)

        if cfg.incline.enabled:
            self.incline = InclineDetector(warmup=warmup)
            self._incline_alpha = cfg.incline.resolve_alpha(rate)

        if cfg.fall.enabled:
            self.fall = FallDetector()

        self.update_count = 0

    def process(self, sample: SensorSample) -> PipelineResult:
        """Feed one sample to every detector.

        Args:
            sample: Validated sample.

        Returns:
            PipelineResult with each detector's output and the names of
            the detectors that fired.
        """
        cfg = self._cfg
        acc = sample.acc
        mag = sample.mag
        result = PipelineResult(seq=sample.seq, timestamp=sample.timestamp)

        if self.motion is not None:
            if isinstance(self.motion, MotionDetectorKalman):
                k = cfg.motion.kalman
                result.motion = self.motion.update(
                    acc, k.process_noise, k.measurement_noise, k.initial_error,
                    cfg.motion.threshold_g, cfg.motion.sample,
                )
            else:
                result.motion = self.motion.update(
                    acc, self._motion_alpha, cfg.motion.threshold_g, cfg.motion.sample
                )
            if result.motion > 0.0:
                result.events.append("motion")

        if self.distortion is not None:
            result.distortion = self.distortion.update(
                mag, self._distortion_alpha, cfg.distortion.threshold
            )
            if result.distortion > 0.0:
                result.events.append("distortion")

        if self.orientation is not None:
            if isinstance(self.orientation, OrientationEstimatorKalman):
                k = cfg.orientation.kalman
                result.orientation = self.orientation.update(
                    acc, mag, k.process_noise, k.measurement_noise, k.initial_error
                )
            else:
                result.orientation = self.orientation.update(
                    acc, mag, self._orientation_alpha
                )

        if self.incline is not None:
            result.incline = self.incline.update(
                acc, self._incline_alpha, cfg.incline.threshold_deg
            )
            if result.incline > 0.0:
                result.events.append("incline")

        if self.fall is not None:
            previous = self.fall.stage
            result.fall_stage = self.fall.update(
                acc, cfg.fall.weightlessness_g, cfg.fall.impact_g
            )
            if result.fall_stage is FallStage.FALL and previous is not FallStage.FALL:
                result.events.append("fall")
                if cfg.fall.auto_reset:
                    self.fall.reset()

        self.update_count += 1
        return result

    def reset(self) -> None:
        """Reset every detector."""
        for detector in (self.motion, self.distortion, self.orientation,
                         self.incline, self.fall):
            if detector is not None:
                detector.reset()
        self.update_count = 0
        logger.debug("Pipeline reset")
