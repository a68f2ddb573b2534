# maze/simulator.py
"""
Robot simulation in the maze environment.

A point robot with continuous position and heading is stepped for a fixed
number of timesteps. Each step it senses, asks the controller for
(angular, linear) signals, turns, then moves unless the target cell is a
wall or off the grid.
"""
import math
import numpy as np
from dataclasses import dataclass, field, replace
from typing import Callable, List, Mapping, Optional, Sequence, Tuple, Union

from core.interfaces import SimulationOptions
from maze.model import Maze
from maze.sensors import sensor_readings

Position = Tuple[float, float]

MAX_SPEED = 3.0
MAX_ANGULAR_VELOCITY = 3.0
GOAL_RADIUS = 5.0


@dataclass
class SimulationResult:
    final_pos: Position
    trajectory: List[Position] = field(default_factory=list)
    collision_count: int = 0
    goal_reached: bool = False
    fitness: float = 0.0


def _round_half_away(x: float) -> int:
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def normalize_angle(angle: float) -> float:
    """Wrap to (-pi, pi]."""
    two_pi = 2.0 * math.pi
    angle = angle - two_pi * math.floor(angle / two_pi)
    return angle - two_pi if angle > math.pi else angle


def distance_to_goal(maze: Maze, pos: Position) -> float:
    gx, gy = maze.goal_pos
    return math.hypot(gx - pos[0], gy - pos[1])


def step(maze: Maze, pos: Position, heading: float,
         outputs: Sequence[float]) -> Tuple[Position, float, bool]:
    '''Apply one pair of controller outputs.

    Args:
        outputs: (angular signal, linear signal), each nominally in [0, 1].

    Returns:
        tuple: New position, new heading and whether the move was rejected.
    '''
    o = np.asarray(outputs, dtype=float).ravel()
    if o.size < 2:
        raise ValueError(f'Controller must return at least 2 outputs, got {o.size}')

    angular = float(np.clip(o[0] - 0.5, -MAX_ANGULAR_VELOCITY, MAX_ANGULAR_VELOCITY))
    linear = float(np.clip(o[1] - 0.5, -MAX_SPEED, MAX_SPEED))

    # angular signal is treated as degrees per step
    new_heading = normalize_angle(heading + math.radians(angular))
    new_x = pos[0] + math.cos(new_heading) * linear
    new_y = pos[1] + math.sin(new_heading) * linear

    cell = (_round_half_away(new_x), _round_half_away(new_y))
    if maze.is_wall(cell) or not maze.in_bounds(cell):
        return pos, new_heading, True
    return (new_x, new_y), new_heading, False


def simulate(maze: Maze, controller_fn: Callable[[list], Sequence[float]],
             options: Optional[SimulationOptions] = None, **overrides) -> SimulationResult:
    '''Run the robot through the maze.

    Args:
        maze (Maze): Environment.
        controller_fn (callable): Maps the 11 sensor readings to 2 outputs.
        options (SimulationOptions): Timestep count and initial heading;
            keyword overrides (``max_timesteps``, ``initial_heading``) win.

    Returns:
        SimulationResult: Final position, trajectory (initial position
        included), collision count, goal flag and distance-based fitness.
    '''
    options = replace(options or SimulationOptions(), **overrides)
    timesteps = maze.timesteps if options.max_timesteps is None else options.max_timesteps

    pos: Position = (float(maze.start_pos[0]), float(maze.start_pos[1]))
    heading = normalize_angle(options.initial_heading)
    trajectory = [pos]
    collisions = 0

    for _ in range(timesteps):
        sensors = sensor_readings(maze, pos, heading)
        outputs = controller_fn(sensors)
        pos, heading, rejected = step(maze, pos, heading, outputs)
        trajectory.append(pos)
        collisions += int(rejected)

    dist = distance_to_goal(maze, pos)
    return SimulationResult(
        final_pos=pos,
        trajectory=trajectory,
        collision_count=collisions,
        goal_reached=dist < GOAL_RADIUS,
        fitness=1.0 / (1.0 + dist),
    )


def behavior_characterization(result: Union[SimulationResult, Mapping]) -> List[float]:
    """Final (x, y) position of a simulation as a 2D behavior."""
    final_pos = result['final_pos'] if isinstance(result, Mapping) else result.final_pos
    x, y = final_pos
    return [float(x), float(y)]
