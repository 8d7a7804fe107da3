"""Incline angle from the accelerometer."""

import logging
import math
from dataclasses import dataclass, field
import numpy as np
from numpy.typing import NDArray

from ..core.types import as_vector
from ..filters import low_pass
from .base import NORM_EPSILON, Detector, DetectorState

logger = logging.getLogger(__name__)


@dataclass
class InclineState(DetectorState):
    """State of the incline detector."""
    filtered: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))


class InclineDetector(Detector):
    """Reports the tilt from vertical once it exceeds a limit."""

    state_class = InclineState

    def update(self, acc, alpha: float, delta: float) -> float:
        """Process one accelerometer sample.

        Args:
            acc: Accelerometer vector [x, y, z].
            alpha: Low-pass coefficient. Smaller means more smoothing.
            delta: Angle limit in degrees; its absolute value is used.

        Returns:
            0.0 while the angle stays within the limit, otherwise the
            angle from vertical in degrees.
        """
        acc = as_vector(acc)
        state = self.state

        if state.setup == 0:
            state.filtered = acc.copy()
            state.setup = 1
            return 0.0

        state.filtered = low_pass(acc, state.filtered, alpha)

        if self._accumulating():
            return 0.0

        norm = float(np.linalg.norm(state.filtered))
        if norm < NORM_EPSILON:
            return 0.0

        cos_theta = min(1.0, max(-1.0, state.filtered[2] / norm))
        theta = math.degrees(math.acos(cos_theta))
        if theta > abs(delta):
            logger.debug("%.4f, %.4f, %.4f\tA: %.2f", acc[0], acc[1], acc[2], theta)
            self._restart()
            return theta
        return 0.0
