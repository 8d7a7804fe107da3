"""Filter primitives shared by the detectors."""

from .exponential import low_pass, high_pass, get_alpha
from .kalman import KalmanState, kalman_step

__all__ = [
    "low_pass",
    "high_pass",
    "get_alpha",
    "KalmanState",
    "kalman_step",
]
