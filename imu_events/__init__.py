"""Streaming motion and orientation event detection for 3-axis
accelerometer and magnetometer samples.

This package provides:
- Low-pass, high-pass and per-axis Kalman filter primitives
- Motion, magnetic distortion, incline and fall detectors
- A tilt-compensated compass (pitch, roll, yaw)
"""

__version__ = "1.0.0"

from .core import Config, FallStage, Orientation, SensorSample, load_config
from .filters import get_alpha, low_pass, KalmanState
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
from .pipeline import DetectorPipeline, PipelineResult

__all__ = [
    "Config",
    "FallStage",
    "Orientation",
    "SensorSample",
    "load_config",
    "get_alpha",
    "low_pass",
    "KalmanState",
    "DistortionDetectorHP",
    "DistortionDetectorLP",
    "FallDetector",
    "InclineDetector",
    "MotionDetectorKalman",
    "MotionDetectorLP",
    "OrientationEstimatorKalman",
    "OrientationEstimatorLP",
    "DetectorPipeline",
    "PipelineResult",
]
