"""Tests for loop monitoring."""

import logging
import pytest

from imu_events.monitoring import LoopMonitor
from conftest import SAMPLE_DT


class TestLoopMonitor:
    """Tests for LoopMonitor class."""

    def test_empty_stats(self, config):
        """A fresh monitor reports zeros."""
        stats = LoopMonitor(config).get_stats()

        assert stats.total_iterations == 0
        assert stats.effective_rate_hz == 0.0
        assert stats.dropped_samples == 0
        assert stats.events == {}

    def test_effective_rate(self, config):
        """The rate follows the sample timestamps."""
        monitor = LoopMonitor(config)
        for i in range(100):
            monitor.start_iteration()
            monitor.end_iteration(i * SAMPLE_DT)

        stats = monitor.get_stats()
        assert stats.total_iterations == 100
        assert stats.effective_rate_hz == pytest.approx(400.0)
        assert stats.interval_mean_ms == pytest.approx(2.5)
        assert stats.rate_error == pytest.approx(0.0, abs=1e-9)
        assert stats.dropped_samples == 0
        assert stats.pass_mean_ms >= 0.0

    def test_slow_clock(self, config):
        """A stream at half the nominal rate shows a negative rate error."""
        monitor = LoopMonitor(config)
        for i in range(10):
            monitor.end_iteration(i * 2 * SAMPLE_DT)

        stats = monitor.get_stats()
        assert stats.effective_rate_hz == pytest.approx(200.0)
        assert stats.rate_error == pytest.approx(-0.5)

    def test_dropped_samples(self, config):
        """A gap of three periods counts two missed samples."""
        monitor = LoopMonitor(config)
        monitor.end_iteration(0.0)
        monitor.end_iteration(SAMPLE_DT)
        metrics = monitor.end_iteration(4 * SAMPLE_DT)

        assert metrics.interval_ms == pytest.approx(7.5)
        assert metrics.missed == 2
        assert metrics.iteration == 3
        assert monitor.get_stats().dropped_samples == 2

    def test_event_tally(self, config):
        """Reported events are counted per detector."""
        monitor = LoopMonitor(config)
        monitor.end_iteration(0.0, ["motion"])
        monitor.end_iteration(SAMPLE_DT, ["motion", "incline"])
        monitor.end_iteration(2 * SAMPLE_DT)

        assert monitor.get_stats().events == {"motion": 2, "incline": 1}

    def test_jitter_logged(self, config, caplog):
        """Intervals far from the nominal period are logged."""
        monitor = LoopMonitor(config)
        with caplog.at_level(logging.DEBUG, logger="imu_events.monitoring.metrics"):
            monitor.end_iteration(0.0)
            monitor.end_iteration(0.006)

        assert any("Sample interval" in r.message for r in caplog.records)

    def test_rate_warning(self, config, caplog):
        """A periodic report warns when the rate is off nominal."""
        config.monitoring.log_interval_s = 0.0
        monitor = LoopMonitor(config)
        with caplog.at_level(logging.INFO, logger="imu_events.monitoring.metrics"):
            for i in range(5):
                monitor.end_iteration(i * 0.01)

        assert any("off nominal" in r.message for r in caplog.records)

    def test_to_dict(self, config):
        """Stats serialize to a flat dictionary."""
        monitor = LoopMonitor(config)
        monitor.end_iteration(0.0)
        monitor.end_iteration(SAMPLE_DT, ["fall"])

        data = monitor.get_stats().to_dict()
        assert data["iterations"] == 2
        assert data["rate_hz"] == pytest.approx(400.0)
        assert data["events"] == {"fall": 1}

    def test_reset(self, config):
        """Reset clears every counter."""
        monitor = LoopMonitor(config)
        monitor.end_iteration(0.0, ["motion"])
        monitor.end_iteration(1.0)
        monitor.reset()

        stats = monitor.get_stats()
        assert stats.total_iterations == 0
        assert stats.dropped_samples == 0
        assert stats.events == {}
