# core/interfaces.py
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple, Union
import numpy as np

Behavior = Tuple[float, ...]
BehaviorLike = Union[Sequence[float], np.ndarray]
DistanceFn = Callable[[BehaviorLike, BehaviorLike], float]
BehaviorFn = Callable[[Any], BehaviorLike]
ControllerFn = Callable[[list], Sequence[float]]


def identity(result: Any) -> Any:
    return result


@dataclass
class NoveltyConfig:
    """
    Keyword configuration for a novelty search run.

    Collects the engine settings in one place so experiment scripts can
    pass them around and build fresh engines (one per run) from them.
    """
    k_nearest: int = 15                 # neighbors averaged by the novelty metric
    archive_threshold: float = 6.0      # score must exceed this to be archived
    min_dist_to_archive: float = 3.0    # separation from existing archive members
    behavior_characterization: BehaviorFn = identity
    distance_fn: Union[str, DistanceFn] = "euclidean"
    exclude_self: bool = False          # drop own behavior from the scoring pool

    def build(self, archive: Sequence[BehaviorLike] = ()):
        from novelty.novelty_archive import NoveltySearch
        return NoveltySearch(
            k_nearest=self.k_nearest,
            archive_threshold=self.archive_threshold,
            min_dist_to_archive=self.min_dist_to_archive,
            behavior_characterization=self.behavior_characterization,
            distance_fn=self.distance_fn,
            exclude_self=self.exclude_self,
            archive=archive,
        )


@dataclass(frozen=True)
class SimulationOptions:
    max_timesteps: Optional[int] = None  # None -> maze.timesteps
    initial_heading: float = 0.0         # radians
