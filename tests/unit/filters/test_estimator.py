"""Unit tests for the stateful StateEstimator."""

import logging

import numpy as np
import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', '..'))

from sensor_fusion.filters import StateEstimator
from sensor_fusion.models import transition_matrix, process_noise
from sensor_fusion.models.radar import radar_measurement, radar_jacobian
from tests.unit.conftest import check_psd


@pytest.fixture
def estimator(cv_state, config):
    return StateEstimator(cv_state, config.P0)


class TestPredict:

    def test_default_matrices_leave_state_unchanged(self, estimator, cv_state, config):
        estimator.predict()

        np.testing.assert_allclose(estimator.x, cv_state)
        np.testing.assert_allclose(estimator.P, config.P0)

    def test_zero_dt(self, estimator, cv_state, config):
        estimator.F = transition_matrix(0.0)
        estimator.Q = process_noise(0.0, config.noise_ax, config.noise_ay)
        estimator.predict()

        np.testing.assert_allclose(estimator.x, cv_state)
        np.testing.assert_allclose(estimator.P, config.P0)

    def test_predict_moves_state(self, estimator, config):
        estimator.F = transition_matrix(1.0)
        estimator.Q = process_noise(1.0, config.noise_ax, config.noise_ay)
        estimator.predict()

        np.testing.assert_allclose(estimator.x, [2.5, 2.0, 0.5, -1.0])
        assert check_psd(estimator.P)


class TestUpdate:

    def test_linear_update_applied(self, estimator, config):
        applied = estimator.update(np.array([2.1, 3.1]), config.H_lidar, config.R_lidar)

        assert applied
        assert estimator.innovation.shape == (2,)
        assert estimator.S.shape == (2, 2)
        assert np.all(np.diag(estimator.P)[:2] < np.diag(config.P0)[:2])

    def test_observation_matrix_not_retained(self, estimator, config):
        """H is a call parameter, not estimator state."""
        estimator.update(np.array([2.1, 3.1]), config.H_lidar, config.R_lidar)
        assert not hasattr(estimator, 'H')
        assert not hasattr(estimator, 'R')

    def test_singular_update_skipped(self, cv_state, config, caplog):
        """Zero covariance with zero noise keeps the prior instead of raising."""
        est = StateEstimator(cv_state, np.zeros((4, 4)))

        with caplog.at_level(logging.WARNING):
            applied = est.update(np.array([10.0, 10.0]), config.H_lidar, np.zeros((2, 2)))

        assert not applied
        np.testing.assert_array_equal(est.x, cv_state)
        np.testing.assert_array_equal(est.P, np.zeros((4, 4)))
        assert est.innovation is None
        assert "Skipping linear update" in caplog.text

    def test_ekf_update_applied(self, estimator, cv_state, config):
        z = radar_measurement(cv_state) + np.array([0.2, -0.01, 0.1])

        applied = estimator.update_ekf(z, radar_measurement, radar_jacobian(cv_state),
                                       config.R_radar, angle_indices=[1])

        assert applied
        assert estimator.innovation.shape == (3,)
        assert np.all(np.isfinite(estimator.x))
        assert check_psd(estimator.P)

    def test_ekf_singular_skipped(self, cv_state, config):
        est = StateEstimator(cv_state, np.zeros((4, 4)))
        z = radar_measurement(cv_state)

        applied = est.update_ekf(z, radar_measurement, radar_jacobian(cv_state), np.zeros((3, 3)))

        assert not applied
        np.testing.assert_array_equal(est.x, cv_state)

    def test_joseph_option(self, cv_state, config):
        est_j = StateEstimator(cv_state, config.P0, joseph=True)
        est_s = StateEstimator(cv_state, config.P0, joseph=False)
        z = np.array([2.1, 3.1])

        est_j.update(z, config.H_lidar, config.R_lidar)
        est_s.update(z, config.H_lidar, config.R_lidar)

        np.testing.assert_allclose(est_j.x, est_s.x)
        np.testing.assert_allclose(est_j.P, est_s.P, atol=1e-8)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
