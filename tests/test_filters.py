"""Tests for filter primitives."""

import math
import numpy as np
import pytest
from numpy.testing import assert_allclose

from imu_events.filters import KalmanState, get_alpha, high_pass, kalman_step, low_pass


class TestLowPass:
    """Tests for the exponential smoothing step."""

    def test_scalar(self):
        """Scalar step follows alpha*s + (1-alpha)*prev."""
        assert low_pass(1.0, 0.0, 0.25) == pytest.approx(0.25)
        assert low_pass(2.0, 4.0, 0.5) == pytest.approx(3.0)

    def test_vector_per_axis(self):
        """Vectors are filtered per axis."""
        result = low_pass(np.array([1.0, 2.0, 3.0]), np.zeros(3), 0.5)
        assert_allclose(result, [0.5, 1.0, 1.5])

    def test_converges_to_constant(self):
        """Repeated application converges to a constant input."""
        value = 0.0
        for _ in range(200):
            value = low_pass(1.0, value, 0.1)
        assert value == pytest.approx(1.0, abs=1e-6)


class TestHighPass:
    """Tests for the first-order high-pass step."""

    def test_step_response(self):
        """A step passes through then decays."""
        out = high_pass(1.0, 0.0, 0.0, 0.5)
        assert out == pytest.approx(0.5)
        out = high_pass(1.0, 1.0, out, 0.5)
        assert out == pytest.approx(0.25)

    def test_constant_input_decays(self):
        """Constant input produces a vanishing output."""
        prev_in, out = np.zeros(3), np.zeros(3)
        sample = np.array([0.3, -0.2, 0.5])
        for _ in range(100):
            out = high_pass(sample, prev_in, out, 0.8)
            prev_in = sample
        assert_allclose(out, np.zeros(3), atol=1e-8)


class TestGetAlpha:
    """Tests for the coefficient helper."""

    def test_closed_form(self):
        """Coefficient matches dt / (rc + dt)."""
        dt = 1.0 / 400
        rc = 1.0 / (2.0 * math.pi * 10)
        assert get_alpha(400, 10) == pytest.approx(dt / (rc + dt), rel=1e-12)

    def test_range(self):
        """Coefficient is strictly between 0 and 1."""
        for rate, cutoff in ((100, 1), (400, 10), (1000, 400)):
            alpha = get_alpha(rate, cutoff)
            assert 0.0 < alpha < 1.0

    def test_higher_cutoff_less_smoothing(self):
        """A higher cutoff gives a larger coefficient."""
        assert get_alpha(400, 20) > get_alpha(400, 5)

    @pytest.mark.parametrize("rate,cutoff", [(0, 10), (-1, 10), (400, 0), (400, -5)])
    def test_invalid_arguments(self, rate, cutoff):
        """Non-positive rate or cutoff is rejected."""
        with pytest.raises(ValueError):
            get_alpha(rate, cutoff)


class TestKalman:
    """Tests for the per-axis Kalman filter."""

    def test_single_step(self):
        """One step follows the scalar recursion."""
        estimate, error = kalman_step(0.0, 1.0, 1.0, q=0.1, r=1.0)

        gain = 1.1 / 2.1
        assert estimate == pytest.approx(gain)
        assert error == pytest.approx(1.1 * (1.0 - gain))

    def test_seed(self):
        """Seeding copies the measurement and sets the error on every axis."""
        state = KalmanState()
        measurement = np.array([0.1, 0.2, 0.3])
        state.seed(measurement, 2.0)

        assert_allclose(state.estimate, measurement)
        assert_allclose(state.error, [2.0, 2.0, 2.0])

        measurement[0] = 5.0
        assert state.estimate[0] == pytest.approx(0.1)

    def test_constant_measurement_is_fixed_point(self):
        """A seeded estimate does not move for the same measurement."""
        state = KalmanState()
        value = np.array([0.0, 0.0, 1.0])
        state.seed(value, 1.0)
        for _ in range(10):
            state.update(value, q=0.1, r=1.0)
        assert_allclose(state.estimate, value)

    def test_axes_are_independent(self):
        """A change on one axis leaves the others untouched."""
        state = KalmanState()
        state.seed(np.zeros(3), 1.0)
        state.update(np.array([1.0, 0.0, 0.0]), q=0.1, r=1.0)

        assert state.estimate[0] > 0.0
        assert state.estimate[1] == 0.0
        assert state.estimate[2] == 0.0

    def test_error_converges(self):
        """Error converges to the steady-state value."""
        state = KalmanState()
        state.seed(np.zeros(3), 1.0)
        for _ in range(200):
            state.update(np.zeros(3), q=0.1, r=1.0)

        # Steady state of p = (p + q) * r / (p + q + r)
        steady = (-0.1 + math.sqrt(0.01 + 0.4)) / 2.0
        assert_allclose(state.error, [steady] * 3, rtol=1e-6)
