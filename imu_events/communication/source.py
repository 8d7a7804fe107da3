"""Sample sources feeding the detection loop.

The sensor bus itself is outside this package. A source only hands over
samples already converted to g and gauss, and reports failed reads as a
status instead of raising, so the loop can skip that tick.
"""

import csv
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional
import numpy as np

from ..core.config import Config
from ..core.types import SensorSample, SourceStats

logger = logging.getLogger(__name__)

CSV_FIELDS = ("timestamp", "seq", "ax", "ay", "az", "mx", "my", "mz")


class SourceError(Exception):
    """Base exception for sample source errors."""
    pass


class ReadStatus(Enum):
    """Outcome of a single read."""
    OK = "ok"
    ERROR = "error"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class ReadResult:
    """Sample returned by a source, if any."""
    status: ReadStatus
    sample: Optional[SensorSample] = None

    @property
    def ok(self) -> bool:
        return self.status is ReadStatus.OK


class CsvReplaySource:
    """Replays a recorded session from a CSV file.

    The file needs a header row with the columns
    ``timestamp,seq,ax,ay,az,mx,my,mz``.
    """

    def __init__(self, path):
        """Initialize replay source.

        Args:
            path: Path to the recording.
        """
        self._path = Path(path)
        self._file = None
        self._reader: Optional[csv.DictReader] = None
        self._stats = SourceStats()

    def open(self) -> None:
        """Open the recording.

        Raises:
            SourceError: If the file is missing or has no usable header.
        """
        if self._file is not None:
            return

        try:
            self._file = open(self._path, "r", encoding="utf-8", newline="")
        except OSError as e:
            raise SourceError(f"Failed to open {self._path}: {e}") from e

        self._reader = csv.DictReader(self._file)
        missing = [name for name in CSV_FIELDS if name not in (self._reader.fieldnames or [])]
        if missing:
            self.close()
            raise SourceError(f"{self._path}: missing columns {', '.join(missing)}")

        logger.info("Replay opened: %s", self._path)

    def close(self) -> None:
        """Close the recording."""
        if self._file is not None:
            self._file.close()
            self._file = None
            self._reader = None
            logger.info("Replay closed: %s", self._path)

    @property
    def is_open(self) -> bool:
        """Whether the recording is open."""
        return self._file is not None

    def __enter__(self) -> "CsvReplaySource":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def read(self) -> ReadResult:
        """Read the next sample.

        Returns:
            ReadResult with status OK and the sample, ERROR for a
            malformed row, or EXHAUSTED at the end of the file.

        Raises:
            SourceError: If the source is not open.
        """
        if self._reader is None:
            raise SourceError("Replay source not open")

        row = next(self._reader, None)
        if row is None:
            return ReadResult(ReadStatus.EXHAUSTED)

        self._stats.total_reads += 1
        try:
            sample = SensorSample(
                seq=int(row["seq"]),
                timestamp=float(row["timestamp"]),
                ax=float(row["ax"]),
                ay=float(row["ay"]),
                az=float(row["az"]),
                mx=float(row["mx"]),
                my=float(row["my"]),
                mz=float(row["mz"]),
            )
        except (TypeError, ValueError) as e:
            self._stats.read_errors += 1
            logger.debug("Malformed row %d: %s", self._reader.line_num, e)
            return ReadResult(ReadStatus.ERROR)

        self._stats.valid_reads += 1
        return ReadResult(ReadStatus.OK, sample)

    @property
    def stats(self) -> SourceStats:
        """Read statistics."""
        return self._stats


class MockSampleSource:
    """Synthetic source for development without hardware.

    Simulates a stationary sensor lying flat: gravity on +Z and the
    magnetic field along +X, with Gaussian noise.
    """

    def __init__(self, config: Config, seed: Optional[int] = None,
                 acc_noise: float = 0.005, mag_noise: float = 0.002):
        """Initialize mock source.

        Args:
            config: System configuration.
            seed: Random seed for reproducible streams.
            acc_noise: Standard deviation of accelerometer noise in g.
            mag_noise: Standard deviation of magnetometer noise in gauss.
        """
        self._dt = 1.0 / config.sensor.sample_rate_hz
        self._rng = np.random.default_rng(seed)
        self._acc_noise = acc_noise
        self._mag_noise = mag_noise
        self._stats = SourceStats()
        self._seq = 0
        self._is_open = False

    def open(self) -> None:
        """Simulate opening the source."""
        self._is_open = True
        logger.info("Mock source opened")

    def close(self) -> None:
        """Simulate closing the source."""
        self._is_open = False
        logger.info("Mock source closed")

    @property
    def is_open(self) -> bool:
        """Whether the source is open."""
        return self._is_open

    def __enter__(self) -> "MockSampleSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def read(self) -> ReadResult:
        """Generate the next synthetic sample.

        Raises:
            SourceError: If the source is not open.
        """
        if not self._is_open:
            raise SourceError("Mock source not open")

        self._seq += 1
        self._stats.total_reads += 1
        self._stats.valid_reads += 1

        acc = np.array([0.0, 0.0, 1.0]) + self._rng.normal(0, self._acc_noise, 3)
        mag = np.array([0.4, 0.0, 0.0]) + self._rng.normal(0, self._mag_noise, 3)

        return ReadResult(ReadStatus.OK, SensorSample(
            seq=self._seq,
            timestamp=self._seq * self._dt,
            ax=float(acc[0]),
            ay=float(acc[1]),
            az=float(acc[2]),
            mx=float(mag[0]),
            my=float(mag[1]),
            mz=float(mag[2]),
        ))

    @property
    def stats(self) -> SourceStats:
        """Read statistics."""
        return self._stats
