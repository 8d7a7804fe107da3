"""Motion detection from the accelerometer.

The sample is smoothed every tick to reject shocks. Once warm-up is over
the filtered vector is compared with the snapshot taken at the end of
warm-up, once every ``sample + 1`` ticks. A deviation above ``delta``
is reported and starts a new baseline epoch.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional
import numpy as np
from numpy.typing import NDArray

from ..core.types import as_vector
from ..filters import KalmanState, low_pass
from .base import DEFAULT_WARMUP, Detector, DetectorState

logger = logging.getLogger(__name__)

# Deviations at or above this are treated as outliers by the Kalman variant.
KALMAN_MAX_TRIGGER = 1.0


@dataclass
class GatedState(DetectorState):
    """Warm-up and decimation counters plus the baseline snapshot."""
    skip: int = 0
    snapshot: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))


@dataclass
class MotionLPState(GatedState):
    """State of the low-pass motion detector."""
    filtered: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))


@dataclass
class MotionKalmanState(GatedState):
    """State of the Kalman motion detector."""
    kalman: KalmanState = field(default_factory=KalmanState)


class _GatedMotionDetector(Detector):
    """Snapshot, decimation and trigger logic shared by both variants."""

    def _check(
        self,
        acc: NDArray[np.float64],
        filtered: NDArray[np.float64],
        delta: float,
        sample: int,
        ceiling: Optional[float] = None,
    ) -> float:
        """Snapshot during warm-up, then gated comparison against it."""
        state = self.state

        if self._accumulating():
            state.snapshot = filtered.copy()
            return 0.0

        if state.skip < sample:
            state.skip += 1
            return 0.0
        state.skip = 0

        m = float(np.linalg.norm(filtered - state.snapshot))
        if m > delta and (ceiling is None or m < ceiling):
            self._restart()
            logger.debug(
                "%.4f, %.4f, %.4f\tD: %.4f", acc[0], acc[1], acc[2], m
            )
            return m
        return 0.0


class MotionDetectorLP(_GatedMotionDetector):
    """Motion detector using a low-pass filter."""

    state_class = MotionLPState

    def update(self, acc, alpha: float, delta: float, sample: int = 0) -> float:
        """Process one accelerometer sample.

        Args:
            acc: Accelerometer vector [x, y, z] in g.
            alpha: Low-pass coefficient (0 < alpha < 1).
            delta: Trigger threshold in g.
            sample: Ticks skipped between two checks.

        Returns:
            0.0 if no motion was detected, otherwise the trigger magnitude.
        """
        acc = as_vector(acc)
        state = self.state

        if state.setup == 0:
            state.filtered = acc.copy()
            state.snapshot = acc.copy()
            state.setup = 1
            return 0.0

        state.filtered = low_pass(acc, state.filtered, alpha)
        return self._check(acc, state.filtered, delta, sample)


class MotionDetectorKalman(_GatedMotionDetector):
    """Motion detector using a per-axis Kalman filter.

    Deviations of ``max_trigger`` or more are rejected as outliers.
    """

    state_class = MotionKalmanState

    def __init__(self, warmup: int = DEFAULT_WARMUP, state: Optional[MotionKalmanState] = None,
                 max_trigger: float = KALMAN_MAX_TRIGGER):
        super().__init__(warmup=warmup, state=state)
        self.max_trigger = max_trigger

    def update(self, acc, q: float, r: float, e: float,
               delta: float, sample: int = 0) -> float:
        """Process one accelerometer sample.

        Args:
            acc: Accelerometer vector [x, y, z] in g.
            q: Process noise covariance.
            r: Measurement noise covariance.
            e: Initial prediction error.
            delta: Trigger threshold in g.
            sample: Ticks skipped between two checks.

        Returns:
            0.0 if no motion was detected, otherwise the trigger magnitude.
        """
        acc = as_vector(acc)
        state = self.state

        if state.setup == 0:
            state.kalman.seed(acc, e)
            state.snapshot = acc.copy()
            state.setup = 1
            return 0.0

        filtered = state.kalman.update(acc, q, r)
        return self._check(acc, filtered, delta, sample, ceiling=self.max_trigger)
