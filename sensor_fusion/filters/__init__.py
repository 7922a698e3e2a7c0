"""Filtering algorithm implementations."""
from .kf import kf_predict, kf_update
from .ekf import ekf_update
from .estimator import StateEstimator
from .common import (
    joseph_update,
    standard_update,
    symmetrize,
    normalize_angle,
    wrap_angles,
    kalman_gain,
    is_valid_covariance,
)

__all__ = [
    # KF components
    'kf_predict',
    'kf_update',
    # EKF components
    'ekf_update',
    # Stateful estimator
    'StateEstimator',
    # Utilities
    'joseph_update',
    'standard_update',
    'symmetrize',
    'normalize_angle',
    'wrap_angles',
    'kalman_gain',
    'is_valid_covariance',
]
