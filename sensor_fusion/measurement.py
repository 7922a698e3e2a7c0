"""Observation records produced by the lidar and radar sensors."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np

from .errors import MalformedObservationError


class SensorType(Enum):
    """Sensor kind of an observation; the value is the data-file tag."""
    LIDAR = 'L'
    RADAR = 'R'

    @property
    def n_meas(self) -> int:
        """Number of raw measurement values the sensor produces."""
        return 2 if self is SensorType.LIDAR else 3


@dataclass
class Observation:
    """
    A single timestamped sensor observation.

    Parameters
    ----------
    sensor_type : SensorType
        Which sensor produced the observation
    timestamp : int
        Timestamp in microseconds
    raw_measurements : ndarray [2] or [3]
        Lidar: [px, py]. Radar: [rho, phi, rho_dot] with phi in radians.
    ground_truth : ndarray [4], optional
        True state [px, py, vx, vy] when available (data files, simulation)
    """
    sensor_type: SensorType
    timestamp: int
    raw_measurements: np.ndarray
    ground_truth: Optional[np.ndarray] = field(default=None)

    def __post_init__(self):
        if not isinstance(self.sensor_type, SensorType):
            try:
                self.sensor_type = SensorType(self.sensor_type)
            except ValueError:
                raise MalformedObservationError(f"Unknown sensor type: {self.sensor_type!r}") from None

        z = np.asarray(self.raw_measurements, dtype=float).ravel()
        if z.shape[0] != self.sensor_type.n_meas:
            raise MalformedObservationError(
                f"{self.sensor_type.name} observation needs {self.sensor_type.n_meas} values, "
                f"got {z.shape[0]}"
            )
        if not np.all(np.isfinite(z)):
            raise MalformedObservationError(f"Non-finite measurement values: {z}")
        self.raw_measurements = z
        try:
            self.timestamp = int(self.timestamp)
        except (TypeError, ValueError, OverflowError):
            raise MalformedObservationError(f"Bad timestamp: {self.timestamp!r}") from None

        if self.ground_truth is not None:
            gt = np.asarray(self.ground_truth, dtype=float).ravel()
            if gt.shape[0] != 4:
                raise MalformedObservationError(f"Ground truth needs 4 values, got {gt.shape[0]}")
            self.ground_truth = gt

    @classmethod
    def lidar(cls, px, py, timestamp, ground_truth=None):
        """Build a lidar observation from a Cartesian position."""
        return cls(SensorType.LIDAR, timestamp, np.array([px, py]), ground_truth)

    @classmethod
    def radar(cls, rho, phi, rho_dot, timestamp, ground_truth=None):
        """Build a radar observation from range, bearing and range-rate."""
        return cls(SensorType.RADAR, timestamp, np.array([rho, phi, rho_dot]), ground_truth)
