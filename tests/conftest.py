"""Pytest fixtures for IMU event detection tests."""

import csv
import sys
from pathlib import Path
import pytest
import numpy as np
from numpy.typing import NDArray

parent_dir = Path(__file__).parent.parent
sys.path.insert(0, str(parent_dir))

from imu_events.core.config import Config
from imu_events.core.types import SensorSample

SAMPLE_DT = 1.0 / 400.0


@pytest.fixture
def config() -> Config:
    """Create default configuration for tests."""
    return Config()


@pytest.fixture
def flat_acc() -> NDArray[np.float64]:
    """Accelerometer reading of a sensor lying flat (1 g on +Z)."""
    return np.array([0.0, 0.0, 1.0])


@pytest.fixture
def north_mag() -> NDArray[np.float64]:
    """Magnetometer reading with the field along +X."""
    return np.array([0.4, 0.0, 0.0])


@pytest.fixture
def sample_reading() -> SensorSample:
    """Create a sample reading of a stationary, level sensor."""
    return SensorSample(
        seq=1,
        timestamp=1000.0,
        ax=0.0,
        ay=0.0,
        az=1.0,
        mx=0.4,
        my=0.0,
        mz=0.0,
    )


@pytest.fixture
def noisy_acc_samples() -> NDArray[np.float64]:
    """Create 200 stationary accelerometer samples with small noise."""
    rng = np.random.default_rng(42)
    samples = np.zeros((200, 3))
    samples[:, 2] = 1.0
    return samples + rng.normal(0, 0.002, (200, 3))


def make_samples(acc_rows, mag=(0.4, 0.0, 0.0), start_seq=1):
    """Build a list of SensorSample from accelerometer rows."""
    samples = []
    for i, acc in enumerate(acc_rows):
        seq = start_seq + i
        samples.append(SensorSample(
            seq=seq,
            timestamp=seq * SAMPLE_DT,
            ax=float(acc[0]),
            ay=float(acc[1]),
            az=float(acc[2]),
            mx=float(mag[0]),
            my=float(mag[1]),
            mz=float(mag[2]),
        ))
    return samples


def write_recording(path: Path, samples) -> Path:
    """Write samples to a CSV recording."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["timestamp", "seq", "ax", "ay", "az", "mx", "my", "mz"])
        for s in samples:
            writer.writerow([s.timestamp, s.seq, s.ax, s.ay, s.az, s.mx, s.my, s.mz])
    return path


@pytest.fixture
def tilt_recording(tmp_path) -> Path:
    """Recording of a level sensor tilted to 60 degrees halfway through."""
    flat = [(0.0, 0.0, 1.0)] * 50
    tilted = [(0.866, 0.0, 0.5)] * 50
    return write_recording(tmp_path / "tilt.csv", make_samples(flat + tilted))
