"""
Visualization utilities for fused tracking results.

Functions for plotting:
- Covariance ellipses
- Estimated vs true trajectories with lidar/radar detections
- Position error over time
"""
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Ellipse

from ...measurement import Observation, SensorType
from ...models.radar import polar_to_cartesian


def plot_covariance_ellipse(
    ax: plt.Axes,
    mean: np.ndarray,
    cov: np.ndarray,
    n_std: float = 2.0,
    **kwargs
) -> Ellipse:
    """
    Plot covariance ellipse on given axis.

    Parameters
    ----------
    ax : matplotlib.axes.Axes
        Axis to plot on
    mean : ndarray [2]
        Center of ellipse (x, y)
    cov : ndarray [2, 2]
        2x2 position covariance
    n_std : float
        Number of standard deviations for ellipse size
    **kwargs
        Additional arguments passed to matplotlib.patches.Ellipse

    Returns
    -------
    ellipse : matplotlib.patches.Ellipse
    """
    eigenvalues, eigenvectors = np.linalg.eigh(cov)

    # Largest axis first
    order = eigenvalues.argsort()[::-1]
    eigenvalues = np.clip(eigenvalues[order], 0.0, None)
    eigenvectors = eigenvectors[:, order]

    angle = np.degrees(np.arctan2(eigenvectors[1, 0], eigenvectors[0, 0]))
    width = 2 * n_std * np.sqrt(eigenvalues[0])
    height = 2 * n_std * np.sqrt(eigenvalues[1])

    ellipse = Ellipse(mean, width, height, angle=angle, **kwargs)
    ax.add_patch(ellipse)
    return ellipse


def observations_to_xy(observations: Sequence[Observation], sensor_type: SensorType) -> np.ndarray:
    """Cartesian positions of the observations from one sensor, shape [N, 2]."""
    points = []
    for obs in observations:
        if obs.sensor_type is not sensor_type:
            continue
        z = obs.raw_measurements
        points.append(z[:2] if sensor_type is SensorType.LIDAR else polar_to_cartesian(z[0], z[1]))
    return np.array(points).reshape(-1, 2)


def plot_fusion_trajectory(
    ax: plt.Axes,
    m_filt: np.ndarray,
    xs_true: Optional[np.ndarray] = None,
    observations: Optional[Sequence[Observation]] = None,
    P_filt: Optional[np.ndarray] = None,
    ellipse_every: int = 10,
    n_std: float = 2.0,
) -> None:
    """
    Plot estimated trajectory against truth and raw detections.

    Parameters
    ----------
    ax : matplotlib.axes.Axes
        Axis to plot on
    m_filt : ndarray [T, 4]
        Estimated states
    xs_true : ndarray [T, 4], optional
        True states
    observations : sequence of Observation, optional
        Raw detections to scatter (radar converted to Cartesian)
    P_filt : ndarray [T, 4, 4], optional
        Covariances; position ellipses drawn every `ellipse_every` steps
    ellipse_every : int
        Ellipse spacing in steps
    n_std : float
        Ellipse size in standard deviations
    """
    if xs_true is not None:
        ax.plot(xs_true[:, 0], xs_true[:, 1], color='black', linewidth=2,
                label='True', alpha=0.8)

    if observations is not None:
        lidar_xy = observations_to_xy(observations, SensorType.LIDAR)
        radar_xy = observations_to_xy(observations, SensorType.RADAR)
        ax.scatter(lidar_xy[:, 0], lidar_xy[:, 1], s=12, c='#2ca02c', marker='o',
                   alpha=0.6, label='Lidar')
        ax.scatter(radar_xy[:, 0], radar_xy[:, 1], s=12, c='#d62728', marker='^',
                   alpha=0.6, label='Radar')

    ax.plot(m_filt[:, 0], m_filt[:, 1], color='#1f77b4', linestyle='--',
            linewidth=1.5, label='EKF', alpha=0.9)

    if P_filt is not None:
        for t in range(0, len(m_filt), max(ellipse_every, 1)):
            plot_covariance_ellipse(ax, m_filt[t, :2], P_filt[t, :2, :2], n_std=n_std,
                                    fill=False, color='#1f77b4', alpha=0.5)

    ax.set_xlabel('X Position')
    ax.set_ylabel('Y Position')
    ax.legend(loc='best', fontsize=8)
    ax.grid(True, alpha=0.3)
    ax.set_aspect('equal', adjustable='datalim')


def plot_error_over_time(
    ax: plt.Axes,
    t: np.ndarray,
    xs_true: np.ndarray,
    m_filt: np.ndarray,
    P_filt: Optional[np.ndarray] = None,
    ylabel: str = 'Position Error',
) -> None:
    """
    Plot position error over time, with the 1-sigma position spread if P is given.

    Parameters
    ----------
    ax : matplotlib.axes.Axes
        Axis to plot on
    t : ndarray [T]
        Time array (seconds)
    xs_true : ndarray [T, 4]
        True states
    m_filt : ndarray [T, 4]
        Estimated states
    P_filt : ndarray [T, 4, 4], optional
        Covariances
    ylabel : str
        Y-axis label
    """
    error = np.hypot(m_filt[:, 0] - xs_true[:, 0], m_filt[:, 1] - xs_true[:, 1])
    ax.plot(t, error, color='#d62728', linewidth=1.5, label='Position error')

    if P_filt is not None:
        pos_std = np.sqrt(P_filt[:, 0, 0] + P_filt[:, 1, 1])
        ax.fill_between(t, np.zeros_like(pos_std), pos_std,
                        alpha=0.2, color='#1f77b4', label='Position std')

    ax.set_xlabel('Time (s)')
    ax.set_ylabel(ylabel)
    ax.legend(loc='best', fontsize=8)
    ax.grid(True, alpha=0.3)
