"""Fixed filter configuration: noise models, observation matrix, initial covariance."""
import json
from dataclasses import dataclass, field, fields
from typing import Any, Dict

import numpy as np


def _default_R_lidar():
    return np.array([[0.0225, 0.0],
                     [0.0, 0.0225]])


def _default_R_radar():
    return np.diag([0.09, 0.0009, 0.09])


def _default_H_lidar():
    return np.array([[1.0, 0.0, 0.0, 0.0],
                     [0.0, 1.0, 0.0, 0.0]])


def _default_P0():
    return np.diag([1.0, 1.0, 1000.0, 1000.0])


# Expected shapes of the matrix-valued fields
_MATRIX_SHAPES = {
    'R_lidar': (2, 2),
    'R_radar': (3, 3),
    'H_lidar': (2, 4),
    'P0': (4, 4),
}


@dataclass
class FusionConfig:
    """
    Configuration of the lidar/radar fusion filter.

    Parameters
    ----------
    R_lidar : ndarray [2, 2]
        Lidar observation noise covariance
    R_radar : ndarray [3, 3]
        Radar observation noise covariance (range, bearing, range-rate)
    H_lidar : ndarray [2, 4]
        Lidar observation matrix
    P0 : ndarray [4, 4]
        Covariance assigned at initialization
    noise_ax, noise_ay : float
        Acceleration noise intensities for the process noise model
    timestamp_scale : float
        Timestamp units per second (1e6 for microseconds)
    min_range : float
        Floor on the range used in the radar observation function
    jacobian_eps : float
        Threshold on px^2 + py^2 below which the radar Jacobian is degenerate
    max_innovation_cond : float
        Largest condition number of S accepted before an update is skipped
    joseph : bool
        Use the Joseph-form covariance update
    """
    R_lidar: np.ndarray = field(default_factory=_default_R_lidar)
    R_radar: np.ndarray = field(default_factory=_default_R_radar)
    H_lidar: np.ndarray = field(default_factory=_default_H_lidar)
    P0: np.ndarray = field(default_factory=_default_P0)
    noise_ax: float = 9.0
    noise_ay: float = 9.0
    timestamp_scale: float = 1e6
    min_range: float = 1e-4
    jacobian_eps: float = 1e-4
    max_innovation_cond: float = 1e12
    joseph: bool = False

    def __post_init__(self):
        for name, shape in _MATRIX_SHAPES.items():
            value = np.array(getattr(self, name), dtype=float)
            if value.shape != shape:
                raise ValueError(f"{name} must have shape {shape}, got {value.shape}")
            setattr(self, name, value)
        if self.noise_ax < 0 or self.noise_ay < 0:
            raise ValueError("Process noise intensities must be non-negative")
        if self.timestamp_scale <= 0:
            raise ValueError(f"timestamp_scale must be positive, got {self.timestamp_scale}")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'FusionConfig':
        """Build a config from a dict of overrides; unknown keys are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = set(d) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**d)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable representation."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = value.tolist() if isinstance(value, np.ndarray) else value
        return result


def load_config(path: str) -> FusionConfig:
    """Load a FusionConfig from a JSON file of overrides."""
    with open(path, 'r') as f:
        overrides = json.load(f)
    return FusionConfig.from_dict(overrides)


def save_config(config: FusionConfig, path: str) -> None:
    """Write a FusionConfig to a JSON file."""
    with open(path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)
