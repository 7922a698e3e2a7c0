"""Lidar observation model: direct measurement of position."""
import numpy as np


class LidarModel:
    """Linear position sensor y = H x + v.

    Parameters
    ----------
    H : ndarray [2, 4]
        Observation matrix
    R : ndarray [2, 2]
        Observation noise covariance
    """

    angle_indices = None

    def __init__(self, H, R):
        self.H = np.asarray(H, dtype=float)
        self.R = np.asarray(R, dtype=float)

    def h(self, x):
        """Observation function: [px, py]."""
        return self.H @ x

    def H_jac(self, x):
        """Observation matrix (constant)."""
        return self.H

    def initial_state(self, z):
        """State built from a first lidar measurement; velocity starts at zero."""
        return np.array([z[0], z[1], 0.0, 0.0])

    def simulate(self, x, rng):
        """Noisy measurement of state x."""
        return self.h(x) + rng.multivariate_normal(np.zeros(2), self.R)
