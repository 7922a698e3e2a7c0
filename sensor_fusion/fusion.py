"""
Lidar/radar fusion controller.

Initializes the estimator from the first observation, then runs a
predict/update cycle per observation, choosing the linear update for lidar
and the EKF update for radar.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np

from .config import FusionConfig
from .errors import DegenerateLinearizationError
from .filters import StateEstimator
from .measurement import Observation, SensorType
from .models import ConstantVelocity, LidarModel, RadarModel

logger = logging.getLogger(__name__)


@dataclass
class FusionStep:
    """Outcome of processing one observation."""
    sensor_type: SensorType
    timestamp: int
    x: np.ndarray
    P: np.ndarray
    dt: float = 0.0
    initialized: bool = False
    updated: bool = False
    innovation: Optional[np.ndarray] = None
    S: Optional[np.ndarray] = None


class FusionEKF:
    """
    Fuses lidar and radar observations of one object into a [px, py, vx, vy] estimate.

    Each instance owns its own StateEstimator, so independent objects are
    tracked with independent instances.

    Parameters
    ----------
    config : FusionConfig, optional
        Noise models, observation matrix and numerical thresholds
    """

    def __init__(self, config=None):
        self.config = config if config is not None else FusionConfig()
        self.motion = ConstantVelocity(self.config.noise_ax, self.config.noise_ay)
        self.lidar = LidarModel(self.config.H_lidar, self.config.R_lidar)
        self.radar = RadarModel(self.config.R_radar, self.config.min_range,
                                self.config.jacobian_eps)

        self._update_handlers = {
            SensorType.LIDAR: self._update_lidar,
            SensorType.RADAR: self._update_radar,
        }
        self._sensor_models = {
            SensorType.LIDAR: self.lidar,
            SensorType.RADAR: self.radar,
        }
        self.reset()

    def reset(self):
        """Return to the uninitialized state."""
        self.estimator = None
        self.previous_timestamp = None

    @property
    def is_initialized(self):
        return self.estimator is not None

    @property
    def x(self):
        """Current state estimate [px, py, vx, vy], or None before the first observation."""
        return None if self.estimator is None else self.estimator.x

    @property
    def P(self):
        """Current state covariance, or None before the first observation."""
        return None if self.estimator is None else self.estimator.P

    def process_measurement(self, observation: Observation) -> FusionStep:
        """
        Consume one observation.

        Parameters
        ----------
        observation : Observation
            Next observation, in non-decreasing timestamp order

        Returns
        -------
        FusionStep
            Estimate after this observation
        """
        if not self.is_initialized:
            return self._initialize(observation)

        dt = (observation.timestamp - self.previous_timestamp) / self.config.timestamp_scale
        if dt < 0:
            logger.warning("Out-of-order timestamp %d (previous %d); clamping dt to 0",
                           observation.timestamp, self.previous_timestamp)
            dt = 0.0
        self.previous_timestamp = max(self.previous_timestamp, observation.timestamp)

        self.estimator.F = self.motion.F(dt)
        self.estimator.Q = self.motion.Q(dt)
        self.estimator.predict()

        updated = self._update_handlers[observation.sensor_type](observation.raw_measurements)

        logger.debug("%s update at %d (dt=%.4f, applied=%s)\nx = %s\nP =\n%s",
                     observation.sensor_type.name, observation.timestamp, dt, updated,
                     self.estimator.x, self.estimator.P)

        return FusionStep(
            sensor_type=observation.sensor_type,
            timestamp=observation.timestamp,
            x=self.estimator.x.copy(),
            P=self.estimator.P.copy(),
            dt=dt,
            updated=updated,
            innovation=self.estimator.innovation if updated else None,
            S=self.estimator.S if updated else None,
        )

    def _initialize(self, observation):
        model = self._sensor_models[observation.sensor_type]
        x0 = model.initial_state(observation.raw_measurements)
        self.estimator = StateEstimator(
            x0, self.config.P0,
            joseph=self.config.joseph,
            max_cond=self.config.max_innovation_cond,
        )
        self.previous_timestamp = observation.timestamp
        logger.info("Initialized from %s observation at %d: x = %s",
                    observation.sensor_type.name, observation.timestamp, x0)

        return FusionStep(
            sensor_type=observation.sensor_type,
            timestamp=observation.timestamp,
            x=self.estimator.x.copy(),
            P=self.estimator.P.copy(),
            initialized=True,
        )

    def _update_lidar(self, z):
        return self.estimator.update(z, self.lidar.H_jac(self.estimator.x), self.lidar.R)

    def _update_radar(self, z):
        try:
            Hj = self.radar.H_jac(self.estimator.x)
        except DegenerateLinearizationError as e:
            logger.warning("Skipping radar update: %s", e)
            return False
        return self.estimator.update_ekf(z, self.radar.h, Hj, self.radar.R,
                                         angle_indices=self.radar.angle_indices)


def run_fusion(observations: Iterable[Observation], config=None):
    """
    Run a fresh FusionEKF over a sequence of observations.

    Parameters
    ----------
    observations : iterable of Observation
        Observations in timestamp order
    config : FusionConfig, optional
        Filter configuration

    Returns
    -------
    m_filt : ndarray [T, 4]
        State estimate after each observation
    P_filt : ndarray [T, 4, 4]
        Covariance after each observation
    cond_nums : ndarray [T]
        Condition numbers of P
    """
    fusion = FusionEKF(config)
    m_filt, P_filt, cond_nums = [], [], []

    for obs in observations:
        step = fusion.process_measurement(obs)
        m_filt.append(step.x)
        P_filt.append(step.P)
        cond_nums.append(np.linalg.cond(step.P))

    return np.array(m_filt).reshape(-1, 4), np.array(P_filt).reshape(-1, 4, 4), np.array(cond_nums)
