"""Unit tests for Extended Kalman Filter update."""

import numpy as np
import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', '..'))

from sensor_fusion.filters.ekf import ekf_update
from sensor_fusion.filters.kf import kf_update
from sensor_fusion.models.radar import radar_measurement, radar_jacobian
from tests.unit.conftest import check_psd, check_symmetric


class TestEKFUpdate:
    """Tests for EKF update step."""

    def test_output_shapes_and_psd(self, cv_state, config):
        z = radar_measurement(cv_state) + np.array([0.1, 0.01, -0.05])

        m, P, innov, S = ekf_update(cv_state, config.P0, z, radar_measurement,
                                    radar_jacobian(cv_state), config.R_radar, angle_indices=[1])

        assert m.shape == (4,)
        assert P.shape == (4, 4)
        assert innov.shape == (3,)
        assert S.shape == (3, 3)
        assert check_symmetric(P)
        assert check_psd(P)

    def test_innovation_uses_nonlinear_h(self, cv_state, config):
        z = np.array([4.0, 1.0, 0.5])

        _, _, innov, _ = ekf_update(cv_state, config.P0, z, radar_measurement,
                                    radar_jacobian(cv_state), config.R_radar, angle_indices=[1])

        np.testing.assert_allclose(innov, z - radar_measurement(cv_state), atol=1e-12)

    def test_bearing_wraparound(self, config):
        """Target just above the negative x-axis, measured just below it."""
        x = np.array([-5.0, 0.01, 1.0, 0.0])
        h_x = radar_measurement(x)
        z = np.array([h_x[0], -np.pi + 0.01, h_x[2]])

        m, _, innov, _ = ekf_update(x, config.P0, z, radar_measurement,
                                    radar_jacobian(x), config.R_radar, angle_indices=[1])

        # ~0.012 rad apart across the branch cut, not ~2*pi
        assert abs(innov[1]) < 0.05
        assert np.linalg.norm(m[:2] - x[:2]) < 0.5

    def test_without_wrap_corrupts_estimate(self, config):
        """Without wrapping the same measurement drags the estimate far away."""
        x = np.array([-5.0, 0.01, 1.0, 0.0])
        h_x = radar_measurement(x)
        z = np.array([h_x[0], -np.pi + 0.01, h_x[2]])

        _, _, innov, _ = ekf_update(x, config.P0, z, radar_measurement,
                                    radar_jacobian(x), config.R_radar, angle_indices=None)

        assert abs(innov[1]) > 6.0

    def test_reduces_to_kf_for_linear(self, cv_state, config):
        """EKF should match KF for a linear observation function."""
        H = config.H_lidar
        z = np.array([2.2, 2.7])

        m_kf, P_kf, _, _ = kf_update(cv_state, config.P0, z, H, config.R_lidar)
        m_ekf, P_ekf, _, _ = ekf_update(cv_state, config.P0, z, lambda x: H @ x, H, config.R_lidar)

        np.testing.assert_allclose(m_ekf, m_kf, rtol=1e-10)
        np.testing.assert_allclose(P_ekf, P_kf, rtol=1e-10)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
