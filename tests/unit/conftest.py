"""Shared pytest fixtures for unit tests."""

import numpy as np
import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from sensor_fusion import FusionConfig, FusionEKF, Observation


@pytest.fixture
def rng():
    """Seeded random number generator."""
    return np.random.default_rng(42)


@pytest.fixture
def config():
    """Default filter configuration."""
    return FusionConfig()


@pytest.fixture
def fusion(config):
    """Uninitialized fusion filter."""
    return FusionEKF(config)


@pytest.fixture
def lidar_obs():
    """Lidar observation at (1, 2)."""
    return Observation.lidar(1.0, 2.0, timestamp=1_000_000)


@pytest.fixture
def radar_obs():
    """Radar observation at range 5 on the x-axis."""
    return Observation.radar(5.0, 0.0, 0.0, timestamp=1_000_000)


@pytest.fixture
def cv_state():
    """State away from the origin with nonzero velocity."""
    return np.array([2.0, 3.0, 0.5, -1.0])


def check_psd(matrix, tol=1e-10):
    """Check if matrix is positive semi-definite."""
    return np.all(np.linalg.eigvalsh(matrix) >= -tol)


def check_symmetric(matrix, tol=1e-10):
    """Check if matrix is symmetric."""
    return np.allclose(matrix, matrix.T, atol=tol)
