"""Sample sources for IMU event detection."""

from .source import (
    CsvReplaySource,
    MockSampleSource,
    ReadResult,
    ReadStatus,
    SourceError,
)

__all__ = [
    "CsvReplaySource",
    "MockSampleSource",
    "ReadResult",
    "ReadStatus",
    "SourceError",
]
