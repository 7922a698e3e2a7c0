"""
Visualization utilities for fused tracking results.

- tracking: trajectories, detections, covariance ellipses and error plots
"""
from .tracking import (
    plot_covariance_ellipse,
    observations_to_xy,
    plot_fusion_trajectory,
    plot_error_over_time,
)

__all__ = [
    'plot_covariance_ellipse',
    'observations_to_xy',
    'plot_fusion_trajectory',
    'plot_error_over_time',
]
