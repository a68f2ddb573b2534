# novelty/distances.py
import numpy as np
from typing import Callable, Union

from novelty.errors import ConfigurationError


def euclidean_distance(b1, b2) -> float:
    d = np.asarray(b1, dtype=float) - np.asarray(b2, dtype=float)
    return float(np.sqrt(np.sum(d ** 2)))


def manhattan_distance(b1, b2) -> float:
    d = np.asarray(b1, dtype=float) - np.asarray(b2, dtype=float)
    return float(np.sum(np.abs(d)))


def cosine_distance(b1, b2) -> float:
    """
    1 - cosine similarity. A zero-length vector is maximally distant
    (returns 1.0) from everything, including another zero vector.
    """
    v1 = np.asarray(b1, dtype=float)
    v2 = np.asarray(b2, dtype=float)
    n1 = np.linalg.norm(v1)
    n2 = np.linalg.norm(v2)
    if n1 == 0.0 or n2 == 0.0:
        return 1.0
    return float(1.0 - np.dot(v1, v2) / (n1 * n2))


DISTANCES = {
    "euclidean": euclidean_distance,
    "manhattan": manhattan_distance,
    "cosine": cosine_distance,
}


def resolve_distance(distance: Union[str, Callable, None]) -> Callable:
    """Map a metric name (or None) to its function; callables pass through."""
    if distance is None:
        return euclidean_distance
    if callable(distance):
        return distance
    try:
        return DISTANCES[distance]
    except KeyError:
        raise ConfigurationError(
            f"Unknown distance '{distance}', expected one of {sorted(DISTANCES)} or a callable"
        ) from None
