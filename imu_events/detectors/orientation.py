"""Tilt-compensated compass from accelerometer and magnetometer.

Both vectors are filtered, then pitch and roll come from the gravity
vector and yaw from the magnetic field projected onto the plane
perpendicular to gravity.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional
import numpy as np
from numpy.typing import NDArray

from ..core.types import Orientation, as_vector
from ..filters import KalmanState, low_pass
from .base import NORM_EPSILON, Detector, DetectorState

logger = logging.getLogger(__name__)


def compute_orientation(acc: NDArray[np.float64], mag: NDArray[np.float64]) -> Optional[Orientation]:
    """Compute pitch, roll and yaw from filtered vectors.

    Args:
        acc: Filtered accelerometer vector.
        mag: Filtered magnetometer vector.

    Returns:
        Orientation in degrees, or None if either vector has (near) zero length.
    """
    acc_norm = float(np.linalg.norm(acc))
    mag_norm = float(np.linalg.norm(mag))
    if acc_norm < NORM_EPSILON or mag_norm < NORM_EPSILON:
        return None

    ax, ay, az = acc
    pitch = math.degrees(math.atan2(ax, math.sqrt(ay * ay + az * az)))
    roll = math.degrees(math.atan2(ay, math.sqrt(ax * ax + az * az)))

    ax, ay, az = acc / acc_norm
    mx, my, mz = mag / mag_norm

    # Horizontal projection of the magnetic field
    h_x = mx * az - mz * ax
    h_y = my * az - mz * ay
    yaw = math.degrees(math.atan2(h_y, h_x))
    # Keep yaw in (-180, 180]
    if yaw <= -180.0:
        yaw += 360.0

    return Orientation(pitch=float(pitch), roll=float(roll), yaw=float(yaw))


@dataclass
class OrientationLPState(DetectorState):
    """State of the low-pass orientation estimator."""
    acc: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    mag: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))


@dataclass
class OrientationKalmanState(DetectorState):
    """State of the Kalman orientation estimator."""
    acc: KalmanState = field(default_factory=KalmanState)
    mag: KalmanState = field(default_factory=KalmanState)


class _OrientationEstimator(Detector):
    """Warm-up gate and angle computation shared by both estimators."""

    def _finish(self, acc: NDArray[np.float64], mag: NDArray[np.float64]) -> Optional[Orientation]:
        if self._accumulating():
            return None

        orientation = compute_orientation(acc, mag)
        if orientation is None:
            logger.debug("Zero-length filtered vector, orientation skipped")
            return None

        logger.debug(
            "Pitch: %.2f, Roll: %.2f, Yaw: %.2f",
            orientation.pitch, orientation.roll, orientation.yaw
        )
        return orientation


class OrientationEstimatorLP(_OrientationEstimator):
    """Orientation estimator with low-pass filtered inputs."""

    state_class = OrientationLPState

    def update(self, acc, mag, alpha: float) -> Optional[Orientation]:
        """Process one pair of samples.

        Args:
            acc: Accelerometer vector [x, y, z].
            mag: Magnetometer vector [x, y, z].
            alpha: Low-pass coefficient. Smaller means more smoothing.

        Returns:
            Orientation once warmed up, None while not ready.
        """
        acc = as_vector(acc)
        mag = as_vector(mag)
        state = self.state

        if state.setup == 0:
            state.acc = acc.copy()
            state.mag = mag.copy()
            state.setup = 1
            return None

        state.acc = low_pass(acc, state.acc, alpha)
        state.mag = low_pass(mag, state.mag, alpha)
        return self._finish(state.acc, state.mag)


class OrientationEstimatorKalman(_OrientationEstimator):
    """Orientation estimator with six independent scalar Kalman filters."""

    state_class = OrientationKalmanState

    def update(self, acc, mag, q: float, r: float, e: float) -> Optional[Orientation]:
        """Process one pair of samples.

        Args:
            acc: Accelerometer vector [x, y, z].
            mag: Magnetometer vector [x, y, z].
            q: Process noise covariance.
            r: Measurement noise covariance.
            e: Initial prediction error.

        Returns:
            Orientation once warmed up, None while not ready.
        """
        acc = as_vector(acc)
        mag = as_vector(mag)
        state = self.state

        if state.setup == 0:
            state.acc.seed(acc, e)
            state.mag.seed(mag, e)
            state.setup = 1
            return None

        return self._finish(state.acc.update(acc, q, r), state.mag.update(mag, q, r))
