"""
Utility Functions.

This module contains utility functions for:
- Metrics computation
- Reading observation files and writing estimates
- Logging setup
- Visualization (organized in visualization/ subfolder)
"""
from .metrics import (
    compute_rmse,
    compute_position_error,
    compute_nees,
    compute_nis,
    compute_symmetry_error,
    compute_min_eigenvalues,
    stability_summary,
)
from .data_io import parse_line, read_observations, write_estimates, ground_truth_array
from .logging_utils import setup_logging

from .visualization import (
    plot_covariance_ellipse,
    plot_fusion_trajectory,
    plot_error_over_time,
)

__all__ = [
    # metrics
    'compute_rmse',
    'compute_position_error',
    'compute_nees',
    'compute_nis',
    'compute_symmetry_error',
    'compute_min_eigenvalues',
    'stability_summary',
    # data io
    'parse_line',
    'read_observations',
    'write_estimates',
    'ground_truth_array',
    # logging
    'setup_logging',
    # visualization
    'plot_covariance_ellipse',
    'plot_fusion_trajectory',
    'plot_error_over_time',
]
