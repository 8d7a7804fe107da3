"""Sample clock monitoring for the detection loop.

Warm-up lengths, decimation gates and filter coefficients are all derived
from the nominal sample rate. The monitor compares sample timestamps with
that rate, counts samples missing from the stream, times each detection
pass and tallies the events reported.
"""

import logging
import time
from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, Optional
import numpy as np

from ..core.config import Config

logger = logging.getLogger(__name__)

# Relative deviation of the effective rate reported as a warning
RATE_TOLERANCE = 0.05


@dataclass
class LoopMetrics:
    """Timing of one processed sample."""
    iteration: int
    interval_ms: float
    pass_ms: float
    missed: int


@dataclass
class LoopStats:
    """Summary over the current window."""
    interval_mean_ms: float = 0.0
    interval_std_ms: float = 0.0
    interval_min_ms: float = 0.0
    interval_max_ms: float = 0.0
    pass_mean_ms: float = 0.0
    pass_max_ms: float = 0.0
    effective_rate_hz: float = 0.0
    rate_error: float = 0.0
    dropped_samples: int = 0
    total_iterations: int = 0
    events: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "rate_hz": self.effective_rate_hz,
            "rate_error": self.rate_error,
            "interval_mean_ms": self.interval_mean_ms,
            "interval_std_ms": self.interval_std_ms,
            "pass_mean_ms": self.pass_mean_ms,
            "pass_max_ms": self.pass_max_ms,
            "dropped_samples": self.dropped_samples,
            "iterations": self.total_iterations,
            "events": dict(self.events),
        }


class LoopMonitor:
    """Watches the sample clock the detectors depend on."""

    def __init__(self, config: Config):
        """Initialize monitor.

        Args:
            config: System configuration with monitoring settings.
        """
        mon_cfg = config.monitoring
        self._period_ms = 1000.0 / mon_cfg.loop_timing.target_hz
        self._jitter_ms = mon_cfg.loop_timing.jitter_warning_ms
        self._log_interval_s = mon_cfg.log_interval_s

        self._intervals: Deque[float] = deque(maxlen=mon_cfg.window_size)
        self._pass_times: Deque[float] = deque(maxlen=mon_cfg.window_size)
        self._events: Counter = Counter()

        self._iteration = 0
        self._dropped = 0
        self._previous_timestamp: Optional[float] = None
        self._pass_start: Optional[float] = None
        self._next_report = time.monotonic() + self._log_interval_s

    def start_iteration(self) -> None:
        """Mark the start of a detection pass."""
        self._pass_start = time.perf_counter()

    def end_iteration(self, timestamp: float, events: Iterable[str] = ()) -> LoopMetrics:
        """Mark the end of a detection pass.

        Args:
            timestamp: Timestamp of the sample just processed, in seconds.
            events: Names of the detectors that fired on this sample.

        Returns:
            Timing of this sample.
        """
        pass_ms = 0.0
        if self._pass_start is not None:
            pass_ms = (time.perf_counter() - self._pass_start) * 1000.0
            self._pass_start = None
        self._pass_times.append(pass_ms)

        interval_ms = 0.0
        missed = 0
        if self._previous_timestamp is not None:
            interval_ms = (timestamp - self._previous_timestamp) * 1000.0
            self._intervals.append(interval_ms)

            missed = max(0, int(interval_ms / self._period_ms + 0.5) - 1)
            self._dropped += missed

            if abs(interval_ms - self._period_ms) > self._jitter_ms:
                logger.debug(
                    "Sample interval %.3f ms, nominal %.3f ms",
                    interval_ms, self._period_ms
                )

        self._previous_timestamp = timestamp
        self._iteration += 1
        self._events.update(events)

        if time.monotonic() >= self._next_report:
            self._report()

        return LoopMetrics(
            iteration=self._iteration,
            interval_ms=interval_ms,
            pass_ms=pass_ms,
            missed=missed,
        )

    def _report(self) -> None:
        stats = self.get_stats()
        logger.info(
            "Loop: rate=%.1f Hz, interval=%.3f+/-%.3f ms, pass=%.3f ms, dropped=%d",
            stats.effective_rate_hz,
            stats.interval_mean_ms,
            stats.interval_std_ms,
            stats.pass_mean_ms,
            stats.dropped_samples,
        )
        if stats.effective_rate_hz > 0 and abs(stats.rate_error) > RATE_TOLERANCE:
            logger.warning(
                "Effective rate %.1f Hz is %+.1f%% off nominal",
                stats.effective_rate_hz, stats.rate_error * 100.0
            )
        self._next_report = time.monotonic() + self._log_interval_s

    def get_stats(self) -> LoopStats:
        """Summarize the current window.

        Returns:
            LoopStats; interval fields stay zero until two samples were seen.
        """
        stats = LoopStats(
            dropped_samples=self._dropped,
            total_iterations=self._iteration,
            events=dict(self._events),
        )

        if self._pass_times:
            passes = np.fromiter(self._pass_times, dtype=np.float64)
            stats.pass_mean_ms = float(passes.mean())
            stats.pass_max_ms = float(passes.max())

        if self._intervals:
            intervals = np.fromiter(self._intervals, dtype=np.float64)
            mean = float(intervals.mean())
            stats.interval_mean_ms = mean
            stats.interval_std_ms = float(intervals.std())
            stats.interval_min_ms = float(intervals.min())
            stats.interval_max_ms = float(intervals.max())
            if mean > 0:
                stats.effective_rate_hz = 1000.0 / mean
                stats.rate_error = self._period_ms / mean - 1.0

        return stats

    def reset(self) -> None:
        """Forget all history."""
        self._intervals.clear()
        self._pass_times.clear()
        self._events.clear()
        self._iteration = 0
        self._dropped = 0
        self._previous_timestamp = None
        self._pass_start = None
