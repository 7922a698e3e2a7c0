"""Extended Kalman Filter (EKF) measurement update."""
from .common import joseph_update, standard_update, symmetrize, kalman_gain, wrap_angles


def ekf_update(m_pred, P_pred, y, h, H, R, joseph=False, angle_indices=None,
               solver='cholesky', max_cond=1e12):
    """
    EKF update step with a Jacobian linearized at the predicted mean.

    The gain and covariance use the supplied Jacobian H, while the innovation
    uses the full nonlinear observation function h.

    Parameters
    ----------
    m_pred : ndarray [n_x]
        Predicted mean (the linearization point of H)
    P_pred : ndarray [n_x, n_x]
        Predicted covariance
    y : ndarray [n_y]
        Observation
    h : callable
        Observation function: h(x) -> [n_y]
    H : ndarray [n_y, n_x]
        Jacobian of h evaluated at m_pred
    R : ndarray [n_y, n_y]
        Observation noise covariance
    joseph : bool
        Use Joseph stabilized update
    angle_indices : list[int]
        Indices of angular observations (innovation wrapped to (-pi, pi])
    solver : str
        Solver for the Kalman gain
    max_cond : float
        Largest accepted condition number of the innovation covariance

    Returns
    -------
    m, P, innov, S
        Updated mean and covariance, wrapped innovation and its covariance

    Raises
    ------
    SingularInnovationError
        If the innovation covariance cannot be inverted safely
    """
    K, S = kalman_gain(P_pred, H, R, solver=solver, max_cond=max_cond)

    innov = wrap_angles(y - h(m_pred), angle_indices)
    m = m_pred + K @ innov
    P = joseph_update(P_pred, K, H, R) if joseph else standard_update(P_pred, K, H)

    return m, symmetrize(P), innov, S
