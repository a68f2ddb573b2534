# maze/sensors.py
"""
Robot sensors for the maze environment.

The controller input is 11 values: a bias term, six rangefinders and four
goal radar quadrants.
"""
import math
import numpy as np
from typing import List, Tuple

from maze.model import Maze

RANGEFINDER_ANGLES = (-90.0, -45.0, 0.0, 45.0, 90.0, -180.0)  # degrees, relative to heading
RANGEFINDER_RANGE = 100.0

# (start, end) in degrees: front-right, front-left, back-left, back-right.
# Front-right wraps through 0.
RADAR_QUADRANTS = ((315.0, 45.0), (45.0, 135.0), (135.0, 225.0), (225.0, 315.0))

PARALLEL_EPS = 1e-10

N_INPUTS = 1 + len(RANGEFINDER_ANGLES) + len(RADAR_QUADRANTS)


def ray_distance(maze: Maze, position: Tuple[float, float], angle: float,
                 max_range: float = RANGEFINDER_RANGE) -> float:
    """
    Distance from ``position`` to the nearest wall edge along ``angle``
    (absolute, radians).

    The ray is intersected with every wall edge segment in one vectorized
    pass. Edges parallel to the ray never count as hits.

    Returns:
        float: Closest hit distance, or ``max_range`` when nothing is hit.
    """
    segs = maze.segments
    if segs.size == 0:
        return max_range

    x1, y1 = float(position[0]), float(position[1])
    dx1 = math.cos(angle) * max_range
    dy1 = math.sin(angle) * max_range

    x3, y3 = segs[:, 0], segs[:, 1]
    dx2 = segs[:, 2] - x3
    dy2 = segs[:, 3] - y3

    det = dx1 * dy2 - dy1 * dx2
    valid = np.abs(det) >= PARALLEL_EPS
    safe_det = np.where(valid, det, 1.0)

    dx3 = x1 - x3
    dy3 = y1 - y3
    t1 = (dx2 * dy3 - dy2 * dx3) / safe_det  # along the ray
    t2 = (dx1 * dy3 - dy1 * dx3) / safe_det  # along the wall edge

    hit = valid & (t1 >= 0.0) & (t1 <= 1.0) & (t2 >= 0.0) & (t2 <= 1.0)
    if not np.any(hit):
        return max_range

    ix = x1 + t1[hit] * dx1
    iy = y1 + t1[hit] * dy1
    distances = np.sqrt((ix - x1) ** 2 + (iy - y1) ** 2)
    return float(min(distances.min(), max_range))


def rangefinder_readings(maze: Maze, position: Tuple[float, float], heading: float) -> List[float]:
    readings = []
    for rel in RANGEFINDER_ANGLES:
        d = ray_distance(maze, position, heading + math.radians(rel), RANGEFINDER_RANGE)
        readings.append(d / RANGEFINDER_RANGE)
    return readings


def normalize_angle_degrees(angle: float) -> float:
    """Wrap to (-180, 180]."""
    angle = angle - 360.0 * math.floor(angle / 360.0)
    return angle - 360.0 if angle > 180.0 else angle


def radar_readings(maze: Maze, position: Tuple[float, float], heading: float) -> List[float]:
    """One-hot-ish quadrant of the goal relative to heading; boundaries inclusive."""
    gx, gy = maze.goal_pos
    x, y = position
    goal_angle = math.degrees(math.atan2(gy - y, gx - x))
    rel = normalize_angle_degrees(goal_angle - math.degrees(heading))
    if rel < 0:
        rel += 360.0

    readings = []
    for start, end in RADAR_QUADRANTS:
        if start <= end:
            inside = start <= rel <= end
        else:
            inside = rel >= start or rel <= end
        readings.append(1.0 if inside else 0.0)
    return readings


def sensor_readings(maze: Maze, position: Tuple[float, float], heading: float) -> List[float]:
    """Bias, rangefinders and radar concatenated into the 11 controller inputs."""
    return [1.0] + rangefinder_readings(maze, position, heading) + radar_readings(maze, position, heading)
