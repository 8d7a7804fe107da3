"""Core module for IMU event detection."""

from .types import (
    SensorSample,
    Orientation,
    FallStage,
    ValidationResult,
    SourceStats,
    as_vector,
)
from .validation import SampleValidator
from .config import Config, load_config

__all__ = [
    "SensorSample",
    "Orientation",
    "FallStage",
    "ValidationResult",
    "SourceStats",
    "as_vector",
    "SampleValidator",
    "Config",
    "load_config",
]
