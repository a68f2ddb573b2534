# maze/model.py
"""
Maze navigation environment: static grid layout.

Text convention: '*' is a wall cell, 'S' the start, 'G' the goal and any
other character open floor. Cell (x, y) is column x of line y.
"""
import numpy as np
from dataclasses import dataclass, field
from typing import FrozenSet, Tuple, Union

from novelty.errors import MazeFormatError

Cell = Tuple[int, int]

DEFAULT_TIMESTEPS = 400

MEDIUM_MAZE = """
********************
*                  *
*                  *
*                  *
*                  *
*         *        *
*         *        *
*         *        *
*         *        *
*         *        *
*S        *       G*
********************
"""

HARD_MAZE = """
********************
*                  *
*                  *
*        ***       *
*        * *       *
*        * *       *
*        * *       *
*        * *       *
*                  *
*                  *
*S                G*
********************
"""


def wall_segments(walls) -> np.ndarray:
    """
    Boundary edges of every wall cell, treating cell (wx, wy) as the unit
    square [wx, wx+1] x [wy, wy+1].

    Returns: array of shape (4 * n_walls, 4) with rows (x1, y1, x2, y2).
    """
    segs = []
    for wx, wy in sorted(walls):
        segs += [
            (wx, wy, wx + 1, wy),            # top
            (wx + 1, wy, wx + 1, wy + 1),    # right
            (wx + 1, wy + 1, wx, wy + 1),    # bottom
            (wx, wy + 1, wx, wy),            # left
        ]
    return np.asarray(segs, dtype=float).reshape(-1, 4)


@dataclass(frozen=True)
class Maze:
    width: int
    height: int
    walls: FrozenSet[Cell]
    start_pos: Cell
    goal_pos: Cell
    timesteps: int = DEFAULT_TIMESTEPS
    segments: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'walls', frozenset(self.walls))
        object.__setattr__(self, 'segments', wall_segments(self.walls))

    @classmethod
    def from_string(cls, maze_string: str, timesteps: int = DEFAULT_TIMESTEPS) -> 'Maze':
        """
        Parse a maze from its text layout.

        Width is the longest line; shorter lines are open floor past their end.

        Raises:
            MazeFormatError if the layout is empty or does not contain exactly
            one 'S' and one 'G'.
        """
        lines = maze_string.replace('\r', '').rstrip().lstrip('\n').split('\n')
        if not any(lines):
            raise MazeFormatError('Maze layout is empty')

        walls = set()
        starts, goals = [], []
        for y, line in enumerate(lines):
            for x, char in enumerate(line):
                if char == '*':
                    walls.add((x, y))
                elif char == 'S':
                    starts.append((x, y))
                elif char == 'G':
                    goals.append((x, y))

        if len(starts) != 1:
            raise MazeFormatError(f"Maze must contain exactly one start 'S', found {len(starts)}")
        if len(goals) != 1:
            raise MazeFormatError(f"Maze must contain exactly one goal 'G', found {len(goals)}")

        return cls(
            width=max(len(line) for line in lines),
            height=len(lines),
            walls=frozenset(walls),
            start_pos=starts[0],
            goal_pos=goals[0],
            timesteps=timesteps,
        )

    def is_wall(self, cell: Cell) -> bool:
        return cell in self.walls

    def in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.width and 0 <= y < self.height


def medium_maze(timesteps: int = DEFAULT_TIMESTEPS) -> Maze:
    return Maze.from_string(MEDIUM_MAZE, timesteps=timesteps)


def hard_maze(timesteps: int = DEFAULT_TIMESTEPS) -> Maze:
    return Maze.from_string(HARD_MAZE, timesteps=timesteps)


BUILTIN_MAZES = {
    'medium': medium_maze,
    'hard': hard_maze,
}


def load_maze(maze: Union[str, Maze], timesteps: int = DEFAULT_TIMESTEPS) -> Maze:
    """Resolve a built-in maze name; Maze instances are returned unchanged."""
    if isinstance(maze, Maze):
        return maze
    try:
        return BUILTIN_MAZES[maze](timesteps=timesteps)
    except KeyError:
        raise ValueError(f"Unknown maze '{maze}', expected one of {sorted(BUILTIN_MAZES)}") from None
