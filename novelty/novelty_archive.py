# novelty/novelty_archive.py
"""
Novelty search engine: behavior archive plus k-nearest-neighbor scoring.

The engine is an immutable value. ``update_archive`` and ``clear_archive``
return a new engine and leave the receiver untouched, so every evolutionary
run (or generation snapshot) owns its archive outright.
"""
import logging
import numpy as np
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Sequence, Tuple, Union

from core.interfaces import Behavior, BehaviorLike, identity
from novelty.distances import euclidean_distance, resolve_distance
from novelty.errors import ConfigurationError

logger = logging.getLogger(__name__)


def as_behavior(vec: BehaviorLike) -> Behavior:
    """Flatten any array-like into an immutable tuple of floats."""
    return tuple(float(v) for v in np.asarray(vec, dtype=float).ravel())


@dataclass(frozen=True)
class NoveltySearch:
    """
    Novelty search state.

    Args:
        k_nearest: Number of nearest neighbors averaged by the novelty metric.
        archive_threshold: Minimum novelty (strictly exceeded) for a behavior
            to be considered for the archive.
        min_dist_to_archive: Minimum distance a candidate must keep from every
            archive member to be admitted.
        behavior_characterization: Maps an evaluation result to a behavior vector.
        distance_fn: Metric name ("euclidean", "manhattan", "cosine") or a
            callable (behavior, behavior) -> float.
        exclude_self: If True, evaluate_population scores each individual
            against the batch without its own behavior. Off by default, which
            puts a zero self-distance into every individual's neighbor pool.
        archive: Initial archive contents.
    """
    k_nearest: int = 15
    archive_threshold: float = 6.0
    min_dist_to_archive: float = 3.0
    behavior_characterization: Callable[[Any], BehaviorLike] = identity
    distance_fn: Union[str, Callable[[BehaviorLike, BehaviorLike], float]] = "euclidean"
    exclude_self: bool = False
    archive: Tuple[Behavior, ...] = field(default=())

    def __post_init__(self):
        if isinstance(self.k_nearest, bool) or not isinstance(self.k_nearest, (int, np.integer)) \
                or self.k_nearest < 1:
            raise ConfigurationError(f'k_nearest must be a positive integer, got {self.k_nearest!r}')
        if self.archive_threshold < 0:
            raise ConfigurationError(
                f'archive_threshold must be non-negative, got {self.archive_threshold!r}')
        if self.min_dist_to_archive < 0:
            raise ConfigurationError(
                f'min_dist_to_archive must be non-negative, got {self.min_dist_to_archive!r}')
        if not callable(self.behavior_characterization):
            raise ConfigurationError('behavior_characterization must be callable')
        # frozen dataclass: normalize fields in place once, at construction
        object.__setattr__(self, 'distance_fn', resolve_distance(self.distance_fn))
        object.__setattr__(self, 'archive', tuple(as_behavior(b) for b in self.archive))

    def __len__(self) -> int:
        return len(self.archive)

    def characterize(self, result: Any) -> Behavior:
        return as_behavior(self.behavior_characterization(result))

    def _distances(self, behavior: BehaviorLike, others: Sequence[BehaviorLike]) -> np.ndarray:
        if self.distance_fn is euclidean_distance:
            X = np.asarray(others, dtype=float).reshape(len(others), -1)
            desc = np.asarray(behavior, dtype=float).ravel()
            return np.sqrt(np.sum((X - desc[None, :]) ** 2, axis=1))
        return np.array([self.distance_fn(behavior, other) for other in others], dtype=float)

    def novelty_score(self, behavior: BehaviorLike, population_behaviors: Sequence[BehaviorLike]) -> float:
        """
        Average distance from ``behavior`` to its k nearest neighbors among
        the archive and ``population_behaviors``.

        If ``population_behaviors`` contains ``behavior`` itself, its zero
        distance counts as one of the neighbors.

        Returns:
            float: Novelty score, 0.0 when archive and population are both empty.
        """
        pool = list(self.archive) + [as_behavior(b) for b in population_behaviors]
        if len(pool) == 0:
            return 0.0
        d = self._distances(as_behavior(behavior), pool)
        k = min(self.k_nearest, len(d))
        nearest = np.partition(d, k - 1)[:k]
        return float(np.mean(nearest))

    def _admissible(self, behavior: Behavior, archive: List[Behavior]) -> bool:
        if not archive:
            return True
        return bool(np.all(self._distances(behavior, archive) >= self.min_dist_to_archive))

    def update_archive(self, new_behaviors: Sequence[BehaviorLike],
                       novelty_scores: Sequence[float]) -> 'NoveltySearch':
        """
        Admit sufficiently novel behaviors into the archive.

        Candidates scoring above ``archive_threshold`` are considered in
        descending score order (ties keep their input order). Each one is
        admitted only if it stays ``min_dist_to_archive`` away from every
        member, including members admitted earlier in the same call.

        Returns:
            NoveltySearch: A new engine with the extended archive.

        Raises:
            ConfigurationError if the two sequences differ in length.
        """
        if len(new_behaviors) != len(novelty_scores):
            raise ConfigurationError(
                f'Got {len(new_behaviors)} behaviors but {len(novelty_scores)} novelty scores')

        candidates = [(as_behavior(b), float(s)) for b, s in zip(new_behaviors, novelty_scores)
                      if s > self.archive_threshold]
        candidates.sort(key=lambda c: -c[1])  # stable

        archive = list(self.archive)
        for behavior, _ in candidates:
            if self._admissible(behavior, archive):
                archive.append(behavior)

        added = len(archive) - len(self.archive)
        if added:
            logger.debug('Archive grew by %d to %d (%d candidates above threshold)',
                         added, len(archive), len(candidates))
        return replace(self, archive=tuple(archive))

    def archive_stats(self) -> Dict[str, Any]:
        return {
            'size': len(self.archive),
            'archive': [list(b) for b in self.archive],
        }

    def clear_archive(self) -> 'NoveltySearch':
        return replace(self, archive=())
