"""Radar observation model: range, bearing and range-rate of [px, py, vx, vy]."""
import numpy as np

from ..errors import DegenerateLinearizationError
from ..filters.common import normalize_angle

# Index of the bearing component in a radar measurement
BEARING_INDEX = 1


def radar_measurement(x, min_range=1e-4):
    """Observation function: [range, bearing, range_rate].

    Parameters
    ----------
    x : ndarray [4]
        State [px, py, vx, vy]
    min_range : float
        Floor on the range used as the range-rate denominator

    Returns
    -------
    y : ndarray [3]
        [rho, phi, rho_dot]
    """
    px, py, vx, vy = x
    rho = np.hypot(px, py)
    phi = np.arctan2(py, px)
    rho_dot = (px * vx + py * vy) / max(rho, min_range)
    return np.array([rho, phi, rho_dot])


def radar_jacobian(x, eps=1e-4):
    """Observation Jacobian: d[rho, phi, rho_dot]/d[px, py, vx, vy].

    Parameters
    ----------
    x : ndarray [4]
        State at which to linearize
    eps : float
        Threshold on px^2 + py^2 below which the Jacobian is undefined

    Returns
    -------
    H : ndarray [3, 4]

    Raises
    ------
    DegenerateLinearizationError
        If the position is at or near the sensor origin
    """
    px, py, vx, vy = x
    c1 = px**2 + py**2
    if not c1 >= eps:
        raise DegenerateLinearizationError(c1, eps)

    c2 = np.sqrt(c1)
    c3 = c1 * c2

    return np.array([
        [px / c2, py / c2, 0.0, 0.0],
        [-py / c1, px / c1, 0.0, 0.0],
        [py * (vx * py - vy * px) / c3, px * (vy * px - vx * py) / c3, px / c2, py / c2]
    ])


def polar_to_cartesian(rho, phi):
    """Convert a range/bearing pair to a Cartesian position."""
    return np.array([rho * np.cos(phi), rho * np.sin(phi)])


class RadarModel:
    """Radar sensor at the origin of the tracking frame.

    Parameters
    ----------
    R : ndarray [3, 3]
        Observation noise covariance (range, bearing, range-rate)
    min_range : float
        Range floor used by the observation function
    jacobian_eps : float
        Squared-range threshold for the Jacobian
    """

    angle_indices = [BEARING_INDEX]

    def __init__(self, R, min_range=1e-4, jacobian_eps=1e-4):
        self.R = np.asarray(R, dtype=float)
        self.min_range = min_range
        self.jacobian_eps = jacobian_eps

    def h(self, x):
        """Observation function at state x."""
        return radar_measurement(x, self.min_range)

    def H_jac(self, x):
        """Observation Jacobian at state x."""
        return radar_jacobian(x, self.jacobian_eps)

    def initial_state(self, z):
        """State built from a first radar measurement; velocity starts at zero."""
        # rho_dot alone cannot give the Cartesian velocity, so it is dropped
        px, py = polar_to_cartesian(z[0], z[1])
        return np.array([px, py, 0.0, 0.0])

    def simulate(self, x, rng):
        """Noisy measurement of state x with the bearing wrapped to (-pi, pi]."""
        y = self.h(x) + rng.multivariate_normal(np.zeros(3), self.R)
        y[BEARING_INDEX] = normalize_angle(y[BEARING_INDEX])
        return y
