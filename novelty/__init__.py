from novelty.distances import cosine_distance, euclidean_distance, manhattan_distance
from novelty.errors import (
    ConfigurationError,
    EvaluationError,
    EvaluationTimeoutError,
    MazeFormatError,
    NoveltySearchError,
)
from novelty.evaluator import evaluate_population
from novelty.novelty_archive import NoveltySearch
