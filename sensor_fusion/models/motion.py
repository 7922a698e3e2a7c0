"""Constant-velocity motion model for the state [px, py, vx, vy]."""
import numpy as np


def transition_matrix(dt):
    """
    State transition for constant velocity over dt seconds.

    Parameters
    ----------
    dt : float
        Elapsed time (seconds)

    Returns
    -------
    F : ndarray [4, 4]
    """
    return np.array([
        [1.0, 0.0, dt, 0.0],
        [0.0, 1.0, 0.0, dt],
        [0.0, 0.0, 1.0, 0.0],
        [0.0, 0.0, 0.0, 1.0]
    ])


def process_noise(dt, noise_ax, noise_ay):
    """
    Process noise (discrete white noise acceleration) over dt seconds.

    Parameters
    ----------
    dt : float
        Elapsed time (seconds)
    noise_ax, noise_ay : float
        Acceleration noise intensities along x and y

    Returns
    -------
    Q : ndarray [4, 4]
    """
    dt_2 = dt * dt
    dt_3 = dt_2 * dt
    dt_4 = dt_3 * dt

    return np.array([
        [dt_4 / 4 * noise_ax, 0.0, dt_3 / 2 * noise_ax, 0.0],
        [0.0, dt_4 / 4 * noise_ay, 0.0, dt_3 / 2 * noise_ay],
        [dt_3 / 2 * noise_ax, 0.0, dt_2 * noise_ax, 0.0],
        [0.0, dt_3 / 2 * noise_ay, 0.0, dt_2 * noise_ay]
    ])


class ConstantVelocity:
    """Constant-velocity dynamics with white acceleration noise.

    Parameters
    ----------
    noise_ax, noise_ay : float
        Acceleration noise intensities
    """

    def __init__(self, noise_ax=9.0, noise_ay=9.0):
        self.noise_ax = noise_ax
        self.noise_ay = noise_ay

    def F(self, dt):
        """State transition matrix for dt."""
        return transition_matrix(dt)

    def Q(self, dt):
        """Process noise covariance for dt."""
        return process_noise(dt, self.noise_ax, self.noise_ay)

    def f(self, x, dt):
        """Propagate a state forward by dt."""
        return self.F(dt) @ x
