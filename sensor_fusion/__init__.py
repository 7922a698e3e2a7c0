"""
Lidar/Radar Sensor Fusion

This package contains implementations of:
- Constant-velocity motion model and lidar/radar observation models
- Kalman and Extended Kalman filter steps and a stateful estimator
- The fusion controller that dispatches observations by sensor type
- Utility functions (metrics, data files, logging, plots)
"""
import logging

from .config import FusionConfig, load_config, save_config
from .errors import (
    FusionError,
    DegenerateLinearizationError,
    SingularInnovationError,
    MalformedObservationError,
)
from .measurement import Observation, SensorType
from .fusion import FusionEKF, FusionStep, run_fusion

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = '0.1.0'

__all__ = [
    'FusionConfig',
    'load_config',
    'save_config',
    'FusionError',
    'DegenerateLinearizationError',
    'SingularInnovationError',
    'MalformedObservationError',
    'Observation',
    'SensorType',
    'FusionEKF',
    'FusionStep',
    'run_fusion',
]
