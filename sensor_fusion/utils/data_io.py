"""
Reading lidar/radar observation files and writing estimates.

Input lines are whitespace separated:

    L  px  py  timestamp  [px_gt py_gt vx_gt vy_gt]
    R  rho phi rho_dot  timestamp  [px_gt py_gt vx_gt vy_gt]
"""
import csv
import logging
from typing import List, Optional, Sequence

import numpy as np

from ..errors import MalformedObservationError
from ..measurement import Observation, SensorType

logger = logging.getLogger(__name__)

ESTIMATE_COLUMNS = [
    'timestamp', 'sensor', 'px_est', 'py_est', 'vx_est', 'vy_est',
    'px_gt', 'py_gt', 'vx_gt', 'vy_gt',
]


def parse_line(line: str) -> Optional[Observation]:
    """
    Parse a single observation line.

    Returns None for blank lines and '#' comments.

    Raises
    ------
    MalformedObservationError
        If the line has an unknown sensor tag or the wrong number of fields
    """
    line = line.strip()
    if not line or line.startswith('#'):
        return None

    tokens = line.split()
    try:
        sensor = SensorType(tokens[0])
    except ValueError:
        raise MalformedObservationError(f"Unknown sensor tag '{tokens[0]}'") from None

    n = sensor.n_meas
    fields = tokens[1:]
    if len(fields) not in (n + 1, n + 5):
        raise MalformedObservationError(
            f"{sensor.name} line needs {n + 1} or {n + 5} fields, got {len(fields)}"
        )

    try:
        raw = [float(v) for v in fields[:n]]
        timestamp = int(fields[n])
        ground_truth = [float(v) for v in fields[n + 1:]] or None
    except ValueError as e:
        raise MalformedObservationError(f"Bad numeric field: {e}") from None

    return Observation(sensor, timestamp, np.array(raw), ground_truth)


def read_observations(path: str, strict: bool = True) -> List[Observation]:
    """
    Read all observations from a data file.

    Parameters
    ----------
    path : str
        Input file
    strict : bool
        Raise on the first malformed line; otherwise log and skip it

    Returns
    -------
    list of Observation
    """
    observations = []
    with open(path, 'r') as f:
        for lineno, line in enumerate(f, start=1):
            try:
                obs = parse_line(line)
            except MalformedObservationError as e:
                if strict:
                    raise MalformedObservationError(f"{path}:{lineno}: {e}") from e
                logger.warning("Skipping %s:%d: %s", path, lineno, e)
                continue
            if obs is not None:
                observations.append(obs)

    logger.info("Read %d observations from %s", len(observations), path)
    return observations


def write_estimates(path: str, observations: Sequence[Observation], m_filt: np.ndarray) -> None:
    """
    Write per-observation estimates (and ground truth when present) to CSV.

    Parameters
    ----------
    path : str
        Output CSV file
    observations : sequence of Observation
        Observations that produced the estimates
    m_filt : ndarray [T, 4]
        State estimate after each observation
    """
    if len(observations) != len(m_filt):
        raise ValueError(f"{len(observations)} observations but {len(m_filt)} estimates")

    with open(path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=ESTIMATE_COLUMNS)
        writer.writeheader()
        for obs, m in zip(observations, m_filt):
            row = {
                'timestamp': obs.timestamp,
                'sensor': obs.sensor_type.value,
                'px_est': m[0], 'py_est': m[1], 'vx_est': m[2], 'vy_est': m[3],
            }
            if obs.ground_truth is not None:
                gt = obs.ground_truth
                row.update({'px_gt': gt[0], 'py_gt': gt[1], 'vx_gt': gt[2], 'vy_gt': gt[3]})
            writer.writerow(row)


def ground_truth_array(observations: Sequence[Observation]) -> np.ndarray:
    """
    Stack ground truth states of the observations.

    Raises
    ------
    ValueError
        If any observation lacks ground truth
    """
    if any(obs.ground_truth is None for obs in observations):
        raise ValueError("Not all observations carry ground truth")
    return np.array([obs.ground_truth for obs in observations]).reshape(-1, 4)
