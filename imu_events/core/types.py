"""Data types for accelerometer/magnetometer event detection."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List
import numpy as np
from numpy.typing import NDArray


def as_vector(values) -> NDArray[np.float64]:
    """Convert a length-3 sequence to a float64 vector."""
    vector = np.asarray(values, dtype=np.float64)
    if vector.shape != (3,):
        raise ValueError(f"Expected a 3-axis vector, got shape {vector.shape}")
    return vector


@dataclass(frozen=True)
class SensorSample:
    """Single accelerometer + magnetometer measurement.

    Values are already converted by the sensor driver:
    - Accelerometer: g
    - Magnetometer: gauss
    """
    seq: int
    timestamp: float  # seconds
    ax: float
    ay: float
    az: float
    mx: float
    my: float
    mz: float

    @property
    def acc(self) -> NDArray[np.float64]:
        """Acceleration in g as a 3-vector."""
        return np.array((self.ax, self.ay, self.az))

    @property
    def mag(self) -> NDArray[np.float64]:
        """Magnetic field in gauss as a 3-vector."""
        return np.array((self.mx, self.my, self.mz))

    @property
    def acc_magnitude(self) -> float:
        """Total acceleration in g."""
        return math.sqrt(self.ax ** 2 + self.ay ** 2 + self.az ** 2)

    @property
    def mag_magnitude(self) -> float:
        """Total field strength in gauss."""
        return math.sqrt(self.mx ** 2 + self.my ** 2 + self.mz ** 2)


@dataclass(frozen=True)
class Orientation:
    """Tilt-compensated orientation in degrees.

    Pitch and roll lie in [-90, 90], yaw in (-180, 180].
    """
    pitch: float
    roll: float
    yaw: float

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {"pitch": self.pitch, "roll": self.roll, "yaw": self.yaw}


class FallStage(Enum):
    """Stage of the fall detection state machine."""
    INIT = 0
    WEIGHTLESSNESS = 1
    FALL = 2


@dataclass
class ValidationResult:
    """Outcome of checking one sample.

    Errors reject the sample; warnings are informational.
    """
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)


@dataclass
class SourceStats:
    """Statistics for sample source reads."""
    total_reads: int = 0
    valid_reads: int = 0
    read_errors: int = 0

    @property
    def error_rate(self) -> float:
        """Fraction of reads that failed."""
        if self.total_reads == 0:
            return 0.0
        return self.read_errors / self.total_reads
