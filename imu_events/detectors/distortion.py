"""Magnetic field distortion detection.

Flags abrupt deviations of the magnetometer vector from its recent
baseline, e.g. a motor or a ferrous object brought near the compass.
"""

import logging
from dataclasses import dataclass, field
import numpy as np
from numpy.typing import NDArray

from ..core.types import as_vector
from ..filters import high_pass, low_pass
from .base import Detector, DetectorState

logger = logging.getLogger(__name__)


@dataclass
class DistortionHPState(DetectorState):
    """State of the high-pass distortion detector."""
    previous_input: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    previous_output: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    reference: float = 0.0


@dataclass
class DistortionLPState(DetectorState):
    """State of the low-pass distortion detector."""
    average: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))


class DistortionDetectorHP(Detector):
    """Distortion detector built on a high-pass filter.

    The magnitude of the sample with its high-frequency part removed is
    averaged during warm-up into a reference. After warm-up each sample's
    magnitude is compared with that reference.
    """

    state_class = DistortionHPState

    def update(self, mag, alpha: float, delta: float) -> float:
        """Process one magnetometer sample.

        Args:
            mag: Magnetometer vector [x, y, z].
            alpha: Filter coefficient (0 < alpha < 1).
            delta: Trigger threshold.

        Returns:
            0.0 if no distortion was detected, otherwise |reference - magnitude|.
        """
        mag = as_vector(mag)
        state = self.state

        # The high-pass memory survives restarts; only the reference is rebuilt.
        state.previous_output = high_pass(
            mag, state.previous_input, state.previous_output, alpha
        )
        state.previous_input = mag.copy()

        m = float(np.linalg.norm(mag - state.previous_output))

        if state.setup == 0:
            state.reference = m
            state.setup = 1
            return 0.0

        if state.setup < self.warmup:
            state.reference = low_pass(m, state.reference, alpha)
            state.setup += 1
            return 0.0

        d = abs(state.reference - m)
        if d > delta:
            logger.debug(
                "%.4f, %.4f, %.4f\tM: %.4f m: %.4f D: %.4f",
                mag[0], mag[1], mag[2], state.reference, m, d
            )
            self._restart()
            return d
        return 0.0


class DistortionDetectorLP(Detector):
    """Distortion detector built on a slow running average.

    The residual is the sample minus the average computed before the
    sample is folded in. The average is updated on every call.
    """

    state_class = DistortionLPState

    def update(self, mag, alpha: float, delta: float) -> float:
        """Process one magnetometer sample.

        Args:
            mag: Magnetometer vector [x, y, z].
            alpha: Low-pass coefficient. Smaller means more smoothing.
            delta: Trigger threshold.

        Returns:
            0.0 if no distortion was detected, otherwise the residual magnitude.
        """
        mag = as_vector(mag)
        state = self.state

        if state.setup == 0:
            state.average = mag.copy()
            state.setup = 1
            return 0.0

        residual = mag - state.average
        state.average = low_pass(mag, state.average, alpha)

        if self._accumulating():
            return 0.0

        m = float(np.linalg.norm(residual))
        if m > delta:
            logger.debug("%.4f, %.4f, %.4f\tD: %.4f", mag[0], mag[1], mag[2], m)
            self._restart()
            return m
        return 0.0
