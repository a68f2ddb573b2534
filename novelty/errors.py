# novelty/errors.py
from typing import Optional


class NoveltySearchError(Exception):
    """Base class for all novelty search errors."""


class ConfigurationError(NoveltySearchError, ValueError):
    """Invalid engine settings or malformed call arguments."""


class MazeFormatError(ConfigurationError):
    """Maze text without exactly one start and one goal."""


class EvaluationError(NoveltySearchError, RuntimeError):
    '''An individual failed during population evaluation.

    Args:
        stage (str): Pipeline stage that failed ("evaluate", "characterize"
            or "score").
        index (int): Position of the failing individual in the population.
        cause (Exception, optional): The underlying exception.
    '''
    def __init__(self, stage: str, index: int, cause: Optional[BaseException] = None):
        self.stage = stage
        self.index = index
        self.cause = cause
        detail = f': {cause!r}' if cause is not None else ''
        super().__init__(f'{stage} failed for individual {index}{detail}')


class EvaluationTimeoutError(EvaluationError):
    def __init__(self, stage: str, index: int, timeout: float):
        self.timeout = timeout
        super().__init__(stage, index)
        self.args = (f'{stage} timed out after {timeout:g}s for individual {index}',)
