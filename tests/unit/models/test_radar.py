"""Unit tests for the radar observation model and its Jacobian."""

import numpy as np
import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', '..'))

from sensor_fusion.errors import DegenerateLinearizationError, FusionError
from sensor_fusion.models import RadarModel, radar_measurement, radar_jacobian, polar_to_cartesian


class TestRadarMeasurement:
    """Tests for h(x) = [rho, phi, rho_dot]."""

    def test_known_point(self):
        """(3, 4) moving radially away at 1 m/s."""
        x = np.array([3.0, 4.0, 0.6, 0.8])
        y = radar_measurement(x)

        assert np.isclose(y[0], 5.0, atol=1e-12), f"Range: {y[0]}"
        assert np.isclose(y[1], np.arctan2(4, 3), atol=1e-12), f"Bearing: {y[1]}"
        assert np.isclose(y[2], 1.0, atol=1e-12), f"Range rate: {y[2]}"

    def test_tangential_motion_zero_range_rate(self):
        x = np.array([5.0, 0.0, 0.0, 3.0])
        assert radar_measurement(x)[2] == pytest.approx(0.0)

    def test_origin_is_finite(self):
        """Range floor keeps h finite at the origin."""
        y = radar_measurement(np.array([0.0, 0.0, 1.0, 1.0]))
        assert np.all(np.isfinite(y))
        assert y[0] == 0.0


class TestRadarJacobian:
    """Tests for the linearization of h."""

    def test_jacobian_shape(self, cv_state):
        H = radar_jacobian(cv_state)
        assert H.shape == (3, 4), f"H shape: {H.shape}"

    def test_jacobian_numerical(self, cv_state):
        """Test Jacobian against numerical differentiation."""
        x = cv_state
        H = radar_jacobian(x)

        eps = 1e-6
        H_num = np.zeros((3, 4))
        for i in range(4):
            x_plus = x.copy()
            x_plus[i] += eps
            x_minus = x.copy()
            x_minus[i] -= eps
            H_num[:, i] = (radar_measurement(x_plus) - radar_measurement(x_minus)) / (2 * eps)

        assert np.allclose(H, H_num, atol=1e-5), f"H:\n{H}\nH_num:\n{H_num}"

    def test_known_values(self):
        x = np.array([1.0, 2.0, 0.2, 0.4])
        H = radar_jacobian(x)

        expected = np.array([
            [0.447214, 0.894427, 0.0, 0.0],
            [-0.4, 0.2, 0.0, 0.0],
            [0.0, 0.0, 0.447214, 0.894427],
        ])
        np.testing.assert_allclose(H, expected, atol=1e-6)

    def test_degenerate_origin_raises(self):
        """A state at the origin cannot be linearized."""
        x = np.array([0.0, 0.0, 1.0, -2.0])

        with pytest.raises(DegenerateLinearizationError) as excinfo:
            radar_jacobian(x)

        assert excinfo.value.range_sq == 0.0
        assert isinstance(excinfo.value, FusionError)
        assert isinstance(excinfo.value, ArithmeticError)

    def test_near_origin_raises(self):
        with pytest.raises(DegenerateLinearizationError):
            radar_jacobian(np.array([1e-3, 1e-3, 0.0, 0.0]), eps=1e-4)

    def test_nan_state_raises(self):
        with pytest.raises(DegenerateLinearizationError):
            radar_jacobian(np.array([np.nan, 1.0, 0.0, 0.0]))

    def test_just_above_threshold_is_finite(self):
        H = radar_jacobian(np.array([0.011, 0.0, 5.0, 5.0]), eps=1e-4)
        assert np.all(np.isfinite(H))


class TestRadarModel:

    @pytest.fixture
    def model(self, config):
        return RadarModel(config.R_radar)

    def test_initial_state_from_polar(self, model):
        """Range-rate is not used; velocity starts at zero."""
        x0 = model.initial_state(np.array([5.0, 0.0, 0.0]))
        np.testing.assert_allclose(x0, [5.0, 0.0, 0.0, 0.0])

    def test_initial_state_ignores_range_rate(self, model):
        x0 = model.initial_state(np.array([2.0, np.pi / 2, 3.0]))
        np.testing.assert_allclose(x0, [0.0, 2.0, 0.0, 0.0], atol=1e-12)

    def test_polar_to_cartesian(self):
        np.testing.assert_allclose(polar_to_cartesian(2.0, np.pi), [-2.0, 0.0], atol=1e-12)

    def test_simulate_bearing_range(self, rng, model):
        x = np.array([-5.0, 0.001, 0.0, 0.0])
        ys = np.array([model.simulate(x, rng) for _ in range(200)])

        assert np.all(ys[:, 1] > -np.pi), "Bearing at or below -pi"
        assert np.all(ys[:, 1] <= np.pi), "Bearing above pi"

    def test_angle_indices(self, model):
        assert model.angle_indices == [1]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
