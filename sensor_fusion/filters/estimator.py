"""Stateful Kalman estimator holding the state, covariance and motion matrices."""
import logging

import numpy as np

from ..errors import SingularInnovationError
from .kf import kf_predict, kf_update
from .ekf import ekf_update

logger = logging.getLogger(__name__)


class StateEstimator:
    """
    Kalman estimator for a single tracked object.

    The caller refreshes F and Q before each predict(). Observation matrices
    are passed into each update call rather than stored.

    Parameters
    ----------
    x : ndarray [n_x]
        Initial state
    P : ndarray [n_x, n_x]
        Initial covariance
    F : ndarray [n_x, n_x], optional
        State transition matrix (identity if omitted)
    Q : ndarray [n_x, n_x], optional
        Process noise covariance (zero if omitted)
    joseph : bool
        Use Joseph stabilized covariance update
    solver : str
        Solver for the Kalman gain: 'lu', 'cholesky', or 'inv'
    max_cond : float
        Largest accepted condition number of the innovation covariance
    """

    def __init__(self, x, P, F=None, Q=None, joseph=False, solver='cholesky', max_cond=1e12):
        self.x = np.array(x, dtype=float)
        self.P = np.array(P, dtype=float)
        n_x = self.x.shape[0]
        self.F = np.eye(n_x) if F is None else np.array(F, dtype=float)
        self.Q = np.zeros((n_x, n_x)) if Q is None else np.array(Q, dtype=float)
        self.joseph = joseph
        self.solver = solver
        self.max_cond = max_cond

        # Innovation and its covariance from the last applied update
        self.innovation = None
        self.S = None

    def predict(self):
        """Propagate state and covariance through F and Q."""
        self.x, self.P = kf_predict(self.x, self.P, self.F, self.Q)

    def update(self, z, H, R):
        """
        Linear measurement update.

        Parameters
        ----------
        z : ndarray [n_y]
            Measurement
        H : ndarray [n_y, n_x]
            Observation matrix
        R : ndarray [n_y, n_y]
            Observation noise covariance

        Returns
        -------
        bool
            False if the update was skipped because S was not invertible
        """
        try:
            x, P, innov, S = kf_update(self.x, self.P, z, H, R, joseph=self.joseph,
                                       solver=self.solver, max_cond=self.max_cond)
        except SingularInnovationError as e:
            logger.warning("Skipping linear update: %s", e)
            return False
        return self._commit(x, P, innov, S)

    def update_ekf(self, z, h, H, R, angle_indices=None):
        """
        Nonlinear measurement update.

        Parameters
        ----------
        z : ndarray [n_y]
            Measurement
        h : callable
            Observation function h(x) -> [n_y]
        H : ndarray [n_y, n_x]
            Jacobian of h evaluated at the current (pre-update) state
        R : ndarray [n_y, n_y]
            Observation noise covariance
        angle_indices : list[int], optional
            Innovation components to wrap to (-pi, pi]

        Returns
        -------
        bool
            False if the update was skipped because S was not invertible
        """
        try:
            x, P, innov, S = ekf_update(self.x, self.P, z, h, H, R, joseph=self.joseph,
                                        angle_indices=angle_indices,
                                        solver=self.solver, max_cond=self.max_cond)
        except SingularInnovationError as e:
            logger.warning("Skipping EKF update: %s", e)
            return False
        return self._commit(x, P, innov, S)

    def _commit(self, x, P, innov, S):
        if not (np.all(np.isfinite(x)) and np.all(np.isfinite(P))):
            # NaN/Inf never enters the estimate; the prior is kept
            logger.warning("Discarding update with non-finite result")
            return False
        self.x, self.P = x, P
        self.innovation, self.S = innov, S
        return True
