"""Common utilities for the Kalman filter update variants."""
import numpy as np
from scipy import linalg as sla

from ..errors import SingularInnovationError


def joseph_update(P_pred, K, H, R):
    """
    Compute Joseph-stabilized covariance update.

    Parameters
    ----------
    P_pred : ndarray [n_x, n_x]
        Predicted covariance
    K : ndarray [n_x, n_y]
        Kalman gain
    H : ndarray [n_y, n_x]
        Observation matrix/Jacobian
    R : ndarray [n_y, n_y]
        Observation noise covariance

    Returns
    -------
    ndarray [n_x, n_x]
        Updated covariance
    """
    n_x = P_pred.shape[0]
    I = np.eye(n_x)
    IKH = I - K @ H
    return IKH @ P_pred @ IKH.T + K @ R @ K.T


def standard_update(P_pred, K, H):
    """
    Compute standard covariance update: P = (I - KH) P_pred.

    Parameters
    ----------
    P_pred : ndarray [n_x, n_x]
        Predicted covariance
    K : ndarray [n_x, n_y]
        Kalman gain
    H : ndarray [n_y, n_x]
        Observation matrix/Jacobian

    Returns
    -------
    ndarray [n_x, n_x]
        Updated covariance
    """
    n_x = P_pred.shape[0]
    I = np.eye(n_x)
    return (I - K @ H) @ P_pred


def symmetrize(P):
    """Return (P + P') / 2 to remove round-off asymmetry."""
    return 0.5 * (P + P.T)


def normalize_angle(angle):
    """Wrap an angle (scalar or array) into (-pi, pi]."""
    wrapped = np.arctan2(np.sin(angle), np.cos(angle))
    wrapped = np.where(wrapped <= -np.pi, wrapped + 2 * np.pi, wrapped)
    return float(wrapped) if wrapped.ndim == 0 else wrapped


def wrap_angles(innovation, angle_indices):
    """
    Wrap specified indices of innovation to (-pi, pi].

    Parameters
    ----------
    innovation : ndarray [n_y]
        Innovation vector (y - h(x))
    angle_indices : list of int or None
        Indices to wrap. If None, returns innovation unchanged.

    Returns
    -------
    ndarray [n_y]
        Innovation with angles wrapped
    """
    if not angle_indices:
        return innovation

    result = innovation.copy()
    for i in angle_indices:
        result[i] = normalize_angle(result[i])
    return result


def _solve_lu(S, B):
    """Solve S @ X = B using LU factorization (np.linalg.solve)."""
    return np.linalg.solve(S, B)


def _solve_cholesky(S, B):
    """Solve S @ X = B using Cholesky factorization (assumes S is SPD)."""
    L = sla.cholesky(S, lower=True)
    return sla.cho_solve((L, True), B)


def _solve_inv(S, B):
    """Solve S @ X = B using explicit matrix inversion (least stable)."""
    return np.linalg.inv(S) @ B


SOLVERS = {
    'lu': _solve_lu,
    'cholesky': _solve_cholesky,
    'inv': _solve_inv,
}


def kalman_gain(P_pred, H, R, solver='cholesky', max_cond=1e12):
    """
    Compute the Kalman gain K = P H' S^{-1} after checking S is invertible.

    Parameters
    ----------
    P_pred : ndarray [n_x, n_x]
        Predicted covariance
    H : ndarray [n_y, n_x]
        Observation matrix/Jacobian
    R : ndarray [n_y, n_y]
        Observation noise covariance
    solver : str
        'cholesky', 'lu' or 'inv'
    max_cond : float
        Largest accepted condition number of S

    Returns
    -------
    K : ndarray [n_x, n_y]
        Kalman gain
    S : ndarray [n_y, n_y]
        Innovation covariance

    Raises
    ------
    SingularInnovationError
        If S is non-finite, singular or its condition number exceeds max_cond
    """
    if solver not in SOLVERS:
        raise ValueError(f"Unknown solver '{solver}', expected one of {sorted(SOLVERS)}")

    S = symmetrize(H @ P_pred @ H.T + R)
    if not np.all(np.isfinite(S)):
        raise SingularInnovationError(np.inf)
    cond = np.linalg.cond(S)
    if not np.isfinite(cond) or cond > max_cond:
        raise SingularInnovationError(cond)

    try:
        K = SOLVERS[solver](S.T, H @ P_pred.T).T
    except np.linalg.LinAlgError:
        # Cholesky rejects an S that is not positive definite
        raise SingularInnovationError(cond) from None
    return K, S


def is_valid_covariance(P, tol=1e-9):
    """
    Check that P is finite, symmetric and positive semi-definite.

    Parameters
    ----------
    P : ndarray [n_x, n_x]
        Covariance matrix
    tol : float
        Tolerance on asymmetry (relative) and on negative eigenvalues

    Returns
    -------
    bool
    """
    if not np.all(np.isfinite(P)):
        return False
    scale = max(np.max(np.abs(P)), 1.0)
    if np.max(np.abs(P - P.T)) > tol * scale:
        return False
    return bool(np.linalg.eigvalsh(P).min() >= -tol * scale)
