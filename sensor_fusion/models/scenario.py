"""Simulated constant-velocity target observed by alternating lidar and radar."""
import numpy as np

from ..config import FusionConfig
from ..measurement import Observation, SensorType
from .lidar import LidarModel
from .radar import RadarModel
from .motion import ConstantVelocity


class ConstantVelocityScenario:
    """Constant-velocity ground truth with lidar/radar observations.

    State: [px, py, vx, vy]
    Observations alternate between sensors following `pattern`.

    Parameters
    ----------
    x0 : ndarray [4]
        Initial true state
    dt_us : int
        Interval between observations (microseconds)
    config : FusionConfig, optional
        Supplies the sensor noise covariances and H_lidar
    pattern : sequence of SensorType
        Sensor order, repeated cyclically
    t0 : int
        Timestamp of the first observation (microseconds)
    """

    def __init__(self, x0=None, dt_us=50000, config=None,
                 pattern=(SensorType.LIDAR, SensorType.RADAR), t0=1477010443000000):
        """Initialize scenario with given parameters."""
        self.config = config if config is not None else FusionConfig()
        self.x0 = np.array([0.6, 0.6, 5.2, 0.0]) if x0 is None else np.asarray(x0, dtype=float)
        self.dt_us = int(dt_us)
        self.pattern = tuple(pattern)
        self.t0 = int(t0)

        self.lidar = LidarModel(self.config.H_lidar, self.config.R_lidar)
        self.radar = RadarModel(self.config.R_radar, self.config.min_range, self.config.jacobian_eps)

        self.motion = ConstantVelocity(self.config.noise_ax, self.config.noise_ay)
        self.dt = self.dt_us / self.config.timestamp_scale

    def simulate(self, T, rng):
        """Generate true states and observations.

        Parameters
        ----------
        T : int
            Number of observations
        rng : numpy.random.Generator
            Random number generator

        Returns
        -------
        xs : ndarray [T, 4]
            True states at each observation time
        observations : list of Observation
            Observations carrying the true state as ground truth
        """
        xs = np.zeros((T, 4))
        observations = []
        x = self.x0.copy()

        for t in range(T):
            if t > 0:
                x = self.motion.f(x, self.dt)
            sensor = self.pattern[t % len(self.pattern)]
            model = self.lidar if sensor is SensorType.LIDAR else self.radar
            z = model.simulate(x, rng)
            xs[t] = x
            observations.append(Observation(sensor, self.t0 + t * self.dt_us, z, ground_truth=x.copy()))

        return xs, observations
