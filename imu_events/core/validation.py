"""Input validation for sensor samples."""

from typing import Optional
import numpy as np

from .types import SensorSample, ValidationResult
from .config import Config


class SampleValidator:
    """Rejects implausible samples before they reach the detectors.

    Detector state is single-threaded history, so a NaN or out-of-range
    value folded into a filter would poison every later result.
    """

    def __init__(self, config: Config):
        """Initialize validator with configuration.

        Args:
            config: System configuration with sensor ranges and dt limits.
        """
        self._config = config
        self._last_seq: Optional[int] = None
        self._last_timestamp: Optional[float] = None

    def validate(self, sample: SensorSample) -> ValidationResult:
        """Validate a sample.

        Args:
            sample: Sample to validate.

        Returns:
            ValidationResult with validation status and any errors/warnings.
        """
        result = ValidationResult(is_valid=True)

        self._check_finite(sample, result)
        if result.is_valid:
            self._check_ranges(sample, result)
        self._check_timestamp(sample, result)
        self._check_sequence(sample, result)

        if result.is_valid:
            self._last_seq = sample.seq
            self._last_timestamp = sample.timestamp

        return result

    def _check_finite(self, sample: SensorSample, result: ValidationResult) -> None:
        """Check all values are finite (not NaN or Inf)."""
        values = [
            sample.timestamp,
            sample.ax, sample.ay, sample.az,
            sample.mx, sample.my, sample.mz,
        ]

        for i, val in enumerate(values):
            if not np.isfinite(val):
                result.add_error(f"Non-finite value at index {i}: {val}")

    def _check_ranges(self, sample: SensorSample, result: ValidationResult) -> None:
        cfg = self._config.sensor

        for name, val in (("ax", sample.ax), ("ay", sample.ay), ("az", sample.az)):
            if abs(val) > cfg.accel_range_g:
                result.add_error(f"{name} out of range: {val:.3f} g")

        for name, val in (("mx", sample.mx), ("my", sample.my), ("mz", sample.mz)):
            if abs(val) > cfg.mag_range_gauss:
                result.add_error(f"{name} out of range: {val:.3f} gauss")

    def _check_timestamp(self, sample: SensorSample, result: ValidationResult) -> None:
        """Validate timestamp monotonicity and dt."""
        if self._last_timestamp is None or not np.isfinite(sample.timestamp):
            return

        cfg = self._config.validation
        dt = sample.timestamp - self._last_timestamp

        if dt <= 0:
            result.add_error(f"Non-monotonic timestamp: dt={dt:.6f}s")
        elif dt < cfg.min_dt_s:
            result.add_warning(f"dt too small: {dt*1000:.3f}ms")
        elif dt > cfg.max_dt_s:
            result.add_warning(f"dt too large: {dt*1000:.3f}ms")

    def _check_sequence(self, sample: SensorSample, result: ValidationResult) -> None:
        """Check for sequence number gaps."""
        if self._last_seq is None:
            return

        expected = self._last_seq + 1
        if sample.seq != expected:
            result.add_warning(
                f"Sequence gap: expected {expected}, got {sample.seq}"
            )

    def reset(self) -> None:
        """Reset validator state."""
        self._last_seq = None
        self._last_timestamp = None
