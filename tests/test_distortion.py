"""Tests for magnetic distortion detection."""

import numpy as np
import pytest

from imu_events.detectors import (
    DEFAULT_WARMUP,
    DistortionDetectorHP,
    DistortionDetectorLP,
    DistortionHPState,
)

FIELD = np.array([0.4, 0.0, 0.0])


class TestDistortionDetectorHP:
    """Tests for the high-pass distortion detector."""

    def test_warmup_reports_nothing(self):
        """Nothing is reported before the reference is built."""
        detector = DistortionDetectorHP()
        rng = np.random.default_rng(3)
        for _ in range(DEFAULT_WARMUP):
            assert detector.update(rng.uniform(-2, 2, 3), 0.5, 0.01) == 0.0

    def test_constant_field_never_fires(self):
        """A steady field stays at the reference."""
        detector = DistortionDetectorHP()
        for _ in range(300):
            assert detector.update(FIELD, 0.5, 0.1) == 0.0

    def test_step_fires(self):
        """A sudden change of field magnitude is reported."""
        detector = DistortionDetectorHP()
        for _ in range(DEFAULT_WARMUP + 10):
            detector.update(FIELD, 0.5, 0.1)

        d = detector.update(np.array([0.8, 0.0, 0.0]), 0.5, 0.1)

        # High-pass output is 0.2, so the magnitude jumps from 0.4 to 0.6
        assert d == pytest.approx(0.2, abs=1e-6)
        assert detector.state.setup == 0

        # Same sample again starts a new reference instead of firing
        assert detector.update(np.array([0.8, 0.0, 0.0]), 0.5, 0.1) == 0.0
        assert detector.state.setup == 1

    def test_restart_keeps_filter_memory(self):
        """Only the warm-up counter restarts after an event."""
        detector = DistortionDetectorHP()
        for _ in range(DEFAULT_WARMUP + 1):
            detector.update(FIELD, 0.5, 0.1)
        detector.update(np.array([0.8, 0.0, 0.0]), 0.5, 0.1)

        np.testing.assert_allclose(detector.state.previous_input, [0.8, 0.0, 0.0])
        assert np.linalg.norm(detector.state.previous_output) > 0.0

    def test_reset(self):
        """Reset zeroes the filter memory and reference."""
        state = DistortionHPState()
        detector = DistortionDetectorHP(state=state)
        for _ in range(5):
            detector.update(FIELD, 0.5, 0.1)

        detector.reset()

        assert state.setup == 0
        assert state.reference == 0.0
        np.testing.assert_allclose(state.previous_input, np.zeros(3))


class TestDistortionDetectorLP:
    """Tests for the running-average distortion detector."""

    def test_warmup_reports_nothing(self):
        """Nothing is reported while the average settles."""
        detector = DistortionDetectorLP()
        rng = np.random.default_rng(4)
        for _ in range(DEFAULT_WARMUP):
            assert detector.update(rng.uniform(-2, 2, 3), 0.1, 0.01) == 0.0

    def test_constant_field_never_fires(self):
        """A steady field has no residual."""
        detector = DistortionDetectorLP()
        for _ in range(300):
            assert detector.update(FIELD, 0.1, 0.05) == 0.0

    def test_step_fires_with_residual(self):
        """The residual is measured against the previous average."""
        detector = DistortionDetectorLP()
        for _ in range(DEFAULT_WARMUP):
            assert detector.update(FIELD, 0.1, 0.1) == 0.0

        d = detector.update(np.array([0.9, 0.0, 0.0]), 0.1, 0.1)
        assert d == pytest.approx(0.5)
        assert detector.state.setup == 0

        assert detector.update(np.array([0.9, 0.0, 0.0]), 0.1, 0.1) == 0.0
        np.testing.assert_allclose(detector.state.average, [0.9, 0.0, 0.0])

    def test_average_updated_while_warming_up(self):
        """The average tracks the input even inside warm-up."""
        detector = DistortionDetectorLP()
        detector.update(FIELD, 0.5, 0.1)
        detector.update(np.array([0.8, 0.0, 0.0]), 0.5, 0.1)

        np.testing.assert_allclose(detector.state.average, [0.6, 0.0, 0.0])

    def test_small_noise_ignored(self, north_mag):
        """Noise well under delta is not reported."""
        detector = DistortionDetectorLP()
        rng = np.random.default_rng(5)
        for _ in range(200):
            noisy = north_mag + rng.normal(0, 0.002, 3)
            assert detector.update(noisy, 0.1, 0.1) == 0.0

    def test_invalid_warmup(self):
        """Warm-up must be at least one sample."""
        with pytest.raises(ValueError):
            DistortionDetectorLP(warmup=-1)
