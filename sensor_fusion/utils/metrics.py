"""
Metrics for evaluating fusion filter performance.
"""
import numpy as np


def compute_rmse(estimated, true):
    """
    Compute per-component Root Mean Squared Error across time.

    Parameters
    ----------
    estimated : ndarray [T, n_x]
        Estimated states
    true : ndarray [T, n_x]
        True states

    Returns
    -------
    ndarray [n_x]
        RMSE of each state component

    Raises
    ------
    ValueError
        If the inputs are empty or their shapes differ
    """
    estimated = np.atleast_2d(estimated)
    true = np.atleast_2d(true)
    if estimated.size == 0 or estimated.shape != true.shape:
        raise ValueError(f"Invalid estimation or ground truth data: "
                         f"{estimated.shape} vs {true.shape}")
    return np.sqrt(np.mean((estimated - true)**2, axis=0))


def compute_position_error(estimated, true):
    """
    Euclidean position error at each time step.

    Parameters
    ----------
    estimated, true : ndarray [T, 4]
        States [px, py, vx, vy]

    Returns
    -------
    ndarray [T]
    """
    return np.hypot(estimated[:, 0] - true[:, 0], estimated[:, 1] - true[:, 1])


def compute_nees(m_filt, P_filt, xs, regularize=1e-8):
    """
    Compute Normalized Estimation Error Squared (NEES).

    NEES = (x - m)' * P^{-1} * (x - m)

    For a consistent filter, NEES should follow chi-squared(n_x) distribution.

    Parameters
    ----------
    m_filt : ndarray [T, n_x]
        Filtered means
    P_filt : ndarray [T, n_x, n_x]
        Filtered covariances
    xs : ndarray [T, n_x]
        True states
    regularize : float
        Small value added to diagonal for numerical stability

    Returns
    -------
    ndarray [T]
        NEES values at each time step
    """
    T = m_filt.shape[0]
    n_x = m_filt.shape[1]
    nees = np.zeros(T)

    for t in range(T):
        error = xs[t] - m_filt[t]
        P_reg = P_filt[t] + regularize * np.eye(n_x)
        try:
            nees[t] = error @ np.linalg.solve(P_reg, error)
        except np.linalg.LinAlgError:
            # Fallback to pseudo-inverse for singular matrices
            nees[t] = error @ np.linalg.lstsq(P_reg, error, rcond=None)[0]

    return nees


def compute_nis(innovations, S_innov):
    """
    Compute Normalized Innovation Squared (NIS).

    NIS = (y - h(x))' S^{-1} (y - h(x))

    Lidar and radar innovations have different sizes, so the inputs are
    sequences rather than stacked arrays.

    Parameters
    ----------
    innovations : sequence of ndarray [n_y]
        Innovation vectors
    S_innov : sequence of ndarray [n_y, n_y]
        Innovation covariances

    Returns
    -------
    ndarray [T]
        NIS values at each time step
    """
    T = len(innovations)
    nis = np.zeros(T)
    for t in range(T):
        v = innovations[t]
        S = S_innov[t]
        nis[t] = v @ np.linalg.solve(S, v)
    return nis


def stability_summary(cond_nums, rmse=None):
    """
    Generate summary statistics for numerical stability metrics.

    Parameters
    ----------
    cond_nums : ndarray
        Condition numbers
    rmse : ndarray, optional
        Per-component RMSE

    Returns
    -------
    dict
        Summary statistics
    """
    summary = {
        'mean_cond': np.mean(cond_nums),
        'max_cond': np.max(cond_nums),
    }
    if rmse is not None:
        summary['rmse'] = rmse
    return summary


def compute_symmetry_error(P_filt):
    """
    Compute symmetry error ||P - P'||_F / ||P||_F over all time steps.

    Parameters
    ----------
    P_filt : ndarray [T, n_x, n_x]
        Covariance matrices

    Returns
    -------
    ndarray [T]
        Relative symmetry error at each time step
    """
    T = P_filt.shape[0]
    sym_err = np.zeros(T)
    for t in range(T):
        P = P_filt[t]
        norm_P = np.linalg.norm(P, 'fro')
        if norm_P > 0:
            sym_err[t] = np.linalg.norm(P - P.T, 'fro') / norm_P
        else:
            sym_err[t] = 0.0
    return sym_err


def compute_min_eigenvalues(P_filt):
    """
    Compute minimum eigenvalue of P at each time step.

    Negative values indicate loss of positive semi-definiteness.

    Parameters
    ----------
    P_filt : ndarray [T, n_x, n_x]
        Covariance matrices

    Returns
    -------
    ndarray [T]
        Minimum eigenvalue at each time step
    """
    T = P_filt.shape[0]
    min_eig = np.zeros(T)
    for t in range(T):
        min_eig[t] = np.linalg.eigvalsh(P_filt[t]).min()
    return min_eig
