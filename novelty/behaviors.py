# novelty/behaviors.py
"""
Behavior characterizations for different domains.

Every function here maps some evaluation result to a fixed-length float
vector, so any of them can be plugged into ``NoveltySearch`` as its
``behavior_characterization``. The maze projection to the final (x, y)
position lives next to the simulator in ``maze.simulator``.
"""
import math
import numpy as np
from typing import Callable, Dict, Mapping, Sequence, Tuple

# Normalization ranges for multi_objective_behavior
FEATURE_RANGES: Dict[str, Tuple[float, float]] = {
    "distance_traveled": (0.0, 100.0),
    "energy_used": (0.0, 50.0),
    "items_collected": (0.0, 10.0),
    "final_x": (-50.0, 50.0),
    "final_y": (-50.0, 50.0),
}


def _round_half_away(x: float) -> int:
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def navigation_2d_behavior(position) -> np.ndarray:
    """Final position of a 2D navigation task as [x, y]."""
    if isinstance(position, (tuple, list, np.ndarray)) and len(position) == 2:
        return np.asarray(position, dtype=float)
    raise ValueError(f"Invalid position format: {position!r}")


def trajectory_behavior(trajectory: Sequence, num_samples: int = 10) -> np.ndarray:
    """
    Fixed-size descriptor from evenly spaced points along a trajectory.

    trajectory: sequence of (x, y) points.
    Short trajectories are padded with their last point (origin if empty).
    Returns: flat vector of length 2 * num_samples.
    """
    points = [tuple(p) for p in trajectory]
    n = len(points)
    if n <= num_samples:
        last = points[-1] if points else (0.0, 0.0)
        sampled = points + [last] * (num_samples - n)
    else:
        idx = [_round_half_away(i * (n - 1) / (num_samples - 1)) for i in range(num_samples)]
        sampled = [points[i] for i in idx]
    return np.asarray(sampled, dtype=float).ravel()


def grid_occupancy_behavior(trajectory: Sequence, grid_size: Tuple[int, int] = (10, 10)) -> np.ndarray:
    """
    Binary occupancy of a (width, height) grid visited by the trajectory.

    Points outside the grid are clamped to the border cells.
    Returns: row-major vector of length width * height.
    """
    width, height = grid_size
    grid = np.zeros((height, width), dtype=float)
    for x, y in trajectory:
        gx = min(max(0, math.floor(x)), width - 1)
        gy = min(max(0, math.floor(y)), height - 1)
        grid[gy, gx] = 1.0
    return grid.ravel()


def multi_objective_behavior(features: Mapping[str, float]) -> np.ndarray:
    """
    Combine named behavioral features into one vector.

    Features are ordered by name. Known features are min-max normalized
    with FEATURE_RANGES and clamped to [0, 1]; unknown ones pass through.
    """
    values = []
    for name, value in sorted(features.items()):
        if name in FEATURE_RANGES:
            low, high = FEATURE_RANGES[name]
            values.append(float(np.clip((value - low) / (high - low), 0.0, 1.0)))
        else:
            values.append(float(value))
    return np.asarray(values, dtype=float)


def sequence_statistics_behavior(sequence: Sequence[Tuple[float, float]]) -> np.ndarray:
    """
    Summary statistics of a (time, value) sequence:
    [mean, std, min, max, last value].
    """
    values = np.asarray([v for _, v in sequence], dtype=float)
    if values.size == 0:
        return np.zeros(5)
    return np.array([values.mean(), values.std(), values.min(), values.max(), values[-1]])


def composite_behavior(*extractors: Callable) -> Callable:
    # concatenates the outputs of several extractors applied to the same result
    def extract(result) -> np.ndarray:
        return np.concatenate([np.asarray(f(result), dtype=float).ravel() for f in extractors])
    return extract
