"""Configuration management for IMU event detection."""

from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Optional
import os

import yaml

from ..filters.exponential import get_alpha

CONFIG_ENV_VAR = "IMU_EVENTS_CONFIG_PATH"


@dataclass
class SensorConfig:
    """Sensor configuration."""
    sample_rate_hz: float = 400.0
    accel_range_g: float = 4.0
    mag_range_gauss: float = 8.1


@dataclass
class KalmanConfig:
    """Per-axis Kalman filter parameters."""
    process_noise: float = 0.1
    measurement_noise: float = 1.0
    initial_error: float = 1.0


class LowPassSection:
    """Mixin for sections with a low-pass coefficient.

    An explicit ``alpha`` wins over ``cutoff_hz``.
    """

    def resolve_alpha(self, sample_rate_hz: float) -> float:
        """Filter coefficient for the given sampling rate."""
        if self.alpha is not None:
            return self.alpha
        return get_alpha(sample_rate_hz, self.cutoff_hz)


@dataclass
class MotionConfig(LowPassSection):
    """Motion detector configuration."""
    enabled: bool = True
    method: str = "lp"
    cutoff_hz: float = 5.0
    alpha: Optional[float] = None
    threshold_g: float = 0.05
    sample: int = 10
    max_trigger_g: float = 1.0
    kalman: KalmanConfig = field(default_factory=KalmanConfig)

    def __post_init__(self):
        _check_method("motion", self.method, ("lp", "kalman"))


@dataclass
class DistortionConfig(LowPassSection):
    """Magnetic distortion detector configuration."""
    enabled: bool = True
    method: str = "lp"
    cutoff_hz: float = 1.0
    alpha: Optional[float] = None
    threshold: float = 0.1

    def __post_init__(self):
        _check_method("distortion", self.method, ("hp", "lp"))


@dataclass
class OrientationConfig(LowPassSection):
    """Orientation estimator configuration."""
    enabled: bool = True
    method: str = "lp"
    cutoff_hz: float = 20.0
    alpha: Optional[float] = None
    kalman: KalmanConfig = field(default_factory=KalmanConfig)

    def __post_init__(self):
        _check_method("orientation", self.method, ("lp", "kalman"))


@dataclass
class InclineConfig(LowPassSection):
    """Incline detector configuration."""
    enabled: bool = True
    cutoff_hz: float = 5.0
    alpha: Optional[float] = None
    threshold_deg: float = 30.0


@dataclass
class FallConfig:
    """Fall detector configuration."""
    enabled: bool = True
    weightlessness_g: float = 0.3
    impact_g: float = 2.0
    auto_reset: bool = False  # otherwise FALL stays latched after the first fall


@dataclass
class DetectorsConfig:
    """Configuration of all detectors."""
    warmup_samples: int = 32
    motion: MotionConfig = field(default_factory=MotionConfig)
    distortion: DistortionConfig = field(default_factory=DistortionConfig)
    orientation: OrientationConfig = field(default_factory=OrientationConfig)
    incline: InclineConfig = field(default_factory=InclineConfig)
    fall: FallConfig = field(default_factory=FallConfig)


@dataclass
class ValidationConfig:
    """Sample validation configuration."""
    max_dt_s: float = 0.01
    min_dt_s: float = 0.0005


@dataclass
class LoopTimingConfig:
    """Loop timing monitoring configuration."""
    target_hz: float = 400.0
    jitter_warning_ms: float = 1.0


@dataclass
class MonitoringConfig:
    """Performance monitoring configuration."""
    loop_timing: LoopTimingConfig = field(default_factory=LoopTimingConfig)
    window_size: int = 1000
    log_interval_s: float = 10.0


@dataclass
class Config:
    """Complete configuration for IMU event detection."""
    sensor: SensorConfig = field(default_factory=SensorConfig)
    detectors: DetectorsConfig = field(default_factory=DetectorsConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)


def _check_method(section: str, method: str, allowed: tuple) -> None:
    if method not in allowed:
        raise ValueError(
            f"Unknown {section} method {method!r}, expected one of {allowed}"
        )


def _dict_to_dataclass(data: dict, cls: type) -> object:
    """Build a config section from a mapping, ignoring unknown keys."""
    kwargs = {}
    for f in fields(cls):
        if f.name not in data:
            continue
        value = data[f.name]
        if is_dataclass(f.type) and isinstance(value, dict):
            value = _dict_to_dataclass(value, f.type)
        kwargs[f.name] = value
    return cls(**kwargs)


def _default_config_path() -> Optional[Path]:
    """Path from the environment, else the shipped defaults if present."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    shipped = Path(__file__).resolve().parents[2] / "config" / "default.yaml"
    return shipped if shipped.is_file() else None


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to configuration file. If None, the path in
            ``IMU_EVENTS_CONFIG_PATH`` is used, then ``config/default.yaml``.
            Built-in defaults apply when neither exists.

    Returns:
        Configuration; sections and keys missing from the file keep
        their defaults.

    Raises:
        FileNotFoundError: If the selected file does not exist.
        ValueError: If the file is not a mapping or a detector method
            is unknown.
    """
    path = Path(config_path) if config_path is not None else _default_config_path()
    if path is None:
        return Config()
    if not path.is_file():
        raise FileNotFoundError(f"No configuration file at {path}")

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")

    return _dict_to_dataclass(data, Config)
