"""Motion and sensor models."""
from .motion import ConstantVelocity, transition_matrix, process_noise
from .lidar import LidarModel
from .radar import (
    RadarModel,
    radar_measurement,
    radar_jacobian,
    polar_to_cartesian,
    BEARING_INDEX,
)
from .scenario import ConstantVelocityScenario

__all__ = [
    'ConstantVelocity',
    'transition_matrix',
    'process_noise',
    'LidarModel',
    'RadarModel',
    'radar_measurement',
    'radar_jacobian',
    'polar_to_cartesian',
    'BEARING_INDEX',
    'ConstantVelocityScenario',
]
