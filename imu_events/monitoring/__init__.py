"""Loop monitoring module for IMU event detection."""

from .metrics import LoopMonitor, LoopMetrics, LoopStats

__all__ = ["LoopMonitor", "LoopMetrics", "LoopStats"]
