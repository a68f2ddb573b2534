from maze.model import Maze, hard_maze, load_maze, medium_maze
from maze.simulator import SimulationResult, behavior_characterization, simulate
