"""One-dimensional Kalman filter applied independently per axis.

There is no cross-axis covariance: each axis is a separate 1-D process
with its own estimate and error.
"""

from dataclasses import dataclass, field
from typing import Tuple
import numpy as np
from numpy.typing import NDArray


def kalman_step(estimate, error, measurement, q: float, r: float) -> Tuple:
    """Run one predict/update cycle.

    Works on floats and elementwise on numpy arrays.

    Args:
        estimate: Current estimate.
        error: Current error (variance) of the estimate.
        measurement: New measurement.
        q: Process noise covariance.
        r: Measurement noise covariance.

    Returns:
        Tuple of (new estimate, new error).
    """
    error = error + q
    gain = error / (error + r)
    estimate = estimate + gain * (measurement - estimate)
    error = error * (1.0 - gain)
    return estimate, error


@dataclass
class KalmanState:
    """Per-axis Kalman estimate and error."""
    estimate: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    error: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))

    def seed(self, measurement: NDArray[np.float64], initial_error: float) -> None:
        """Start from a measurement with the given error on every axis."""
        self.estimate = np.array(measurement, dtype=np.float64)
        self.error = np.full(self.estimate.shape, float(initial_error))

    def update(self, measurement: NDArray[np.float64], q: float, r: float) -> NDArray[np.float64]:
        """Fold a measurement into the estimate.

        Args:
            measurement: New measurement, same shape as the estimate.
            q: Process noise covariance.
            r: Measurement noise covariance.

        Returns:
            Updated estimate.
        """
        self.estimate, self.error = kalman_step(
            self.estimate, self.error, measurement, q, r
        )
        return self.estimate
