"""Streaming motion and orientation detectors."""

from .base import DEFAULT_WARMUP, NORM_EPSILON, Detector, DetectorState
from .motion import (
    MotionDetectorLP,
    MotionDetectorKalman,
    MotionLPState,
    MotionKalmanState,
    KALMAN_MAX_TRIGGER,
)
from .distortion import (
    DistortionDetectorHP,
    DistortionDetectorLP,
    DistortionHPState,
    DistortionLPState,
)
from .orientation import (
    OrientationEstimatorLP,
    OrientationEstimatorKalman,
    OrientationLPState,
    OrientationKalmanState,
    compute_orientation,
)
from .incline import InclineDetector, InclineState
from .fall import FallDetector, FallState

__all__ = [
    "DEFAULT_WARMUP",
    "NORM_EPSILON",
    "Detector",
    "DetectorState",
    "MotionDetectorLP",
    "MotionDetectorKalman",
    "MotionLPState",
    "MotionKalmanState",
    "KALMAN_MAX_TRIGGER",
    "DistortionDetectorHP",
    "DistortionDetectorLP",
    "DistortionHPState",
    "DistortionLPState",
    "OrientationEstimatorLP",
    "OrientationEstimatorKalman",
    "OrientationLPState",
    "OrientationKalmanState",
    "compute_orientation",
    "InclineDetector",
    "InclineState",
    "FallDetector",
    "FallState",
]
