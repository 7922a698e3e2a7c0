"""Linear Kalman Filter (KF) predict and update steps."""
from .common import joseph_update, standard_update, symmetrize, kalman_gain


def kf_predict(m, P, F, Q):
    """
    KF time update.

    Parameters
    ----------
    m : ndarray [n_x]
        Current mean
    P : ndarray [n_x, n_x]
        Current covariance
    F : ndarray [n_x, n_x]
        State transition matrix
    Q : ndarray [n_x, n_x]
        Process noise covariance

    Returns
    -------
    m_pred : ndarray [n_x]
    P_pred : ndarray [n_x, n_x]
    """
    m_pred = F @ m
    P_pred = symmetrize(F @ P @ F.T + Q)
    return m_pred, P_pred


def kf_update(m_pred, P_pred, y, H, R, joseph=False, solver='cholesky', max_cond=1e12):
    """
    KF measurement update for a linear observation y = H x + v.

    Parameters
    ----------
    m_pred : ndarray [n_x]
        Predicted mean
    P_pred : ndarray [n_x, n_x]
        Predicted covariance
    y : ndarray [n_y]
        Observation
    H : ndarray [n_y, n_x]
        Observation matrix
    R : ndarray [n_y, n_y]
        Observation noise covariance
    joseph : bool
        Use Joseph stabilized covariance update
    solver : str
        Solver for the Kalman gain: 'lu', 'cholesky', or 'inv'
    max_cond : float
        Largest accepted condition number of the innovation covariance

    Returns
    -------
    m : ndarray [n_x]
        Updated mean
    P : ndarray [n_x, n_x]
        Updated covariance
    innov : ndarray [n_y]
        Innovation y - H m_pred
    S : ndarray [n_y, n_y]
        Innovation covariance

    Raises
    ------
    SingularInnovationError
        If the innovation covariance cannot be inverted safely
    """
    K, S = kalman_gain(P_pred, H, R, solver=solver, max_cond=max_cond)

    innov = y - H @ m_pred
    m = m_pred + K @ innov
    P = joseph_update(P_pred, K, H, R) if joseph else standard_update(P_pred, K, H)

    return m, symmetrize(P), innov, S
