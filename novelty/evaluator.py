# novelty/evaluator.py
"""
Population evaluation for novelty search.

Runs the three per-individual stages (evaluate, characterize, score) over a
bounded worker pool, keeps results aligned with the input order, and folds
the whole batch into the archive once at the end.
"""
import logging
import os
import time
from concurrent.futures import (
    Executor,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    wait,
)
from functools import partial
from typing import Any, Callable, List, Optional, Sequence, Tuple

from novelty.errors import EvaluationError, EvaluationTimeoutError
from novelty.novelty_archive import NoveltySearch

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def default_workers() -> int:
    return os.cpu_count() or 1


def ordered_map(
    executor: Executor,
    fn: Callable,
    items: Sequence,
    stage: str,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> List[Any]:
    '''Apply ``fn`` to every item on ``executor`` and collect results in input order.

    Each result is awaited for at most ``timeout`` seconds. The first failing
    index (in input order) aborts the whole map: its exception is re-raised
    as an EvaluationError and every task that has not started yet is cancelled.

    Raises:
        EvaluationTimeoutError if a task does not finish in time.
        EvaluationError if a task raises.
    '''
    futures = [executor.submit(fn, item) for item in items]
    results = []
    try:
        for index, future in enumerate(futures):
            # a TimeoutError raised by fn itself is a task failure, not a timeout
            wait([future], timeout=timeout)
            if not future.done():
                raise EvaluationTimeoutError(stage, index, timeout)
            try:
                results.append(future.result())
            except Exception as exc:
                raise EvaluationError(stage, index, exc) from exc
    except EvaluationError:
        for future in futures:
            future.cancel()
        raise
    return results


def _score(engine: NoveltySearch, behaviors: list, index: int) -> float:
    if engine.exclude_self:
        pool = behaviors[:index] + behaviors[index + 1:]
    else:
        pool = behaviors
    return engine.novelty_score(behaviors[index], pool)


def evaluate_population(
    engine: NoveltySearch,
    population: Sequence[Any],
    eval_fn: Callable[[Any], Any],
    max_workers: Optional[int] = None,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
    use_processes: bool = False,
) -> Tuple[List[float], NoveltySearch]:
    '''Evaluate a population with novelty search.

    Args:
        engine (NoveltySearch): Current engine; it is not modified.
        population (sequence): Individuals passed one by one to ``eval_fn``.
        eval_fn (callable): Individual -> evaluation result.
        max_workers (int): Pool size. Defaults to the number of CPUs.
        timeout (float): Per-task limit in seconds, None for no limit.
        use_processes (bool): Use a process pool instead of threads. Requires
            ``eval_fn`` and the engine's behavior function to be picklable.

    Returns:
        tuple: Novelty scores aligned with ``population`` and the updated engine.

    Raises:
        EvaluationError if any individual fails in any stage; no partial
        scores are returned since every score depends on the whole batch.
    '''
    population = list(population)
    if not population:
        return [], engine

    workers = max(1, min(max_workers or default_workers(), len(population)))
    pool_cls = ProcessPoolExecutor if use_processes else ThreadPoolExecutor
    executor = pool_cls(max_workers=workers)
    try:
        t0 = time.perf_counter()
        results = ordered_map(executor, eval_fn, population, 'evaluate', timeout)
        t1 = time.perf_counter()
        behaviors = ordered_map(executor, engine.characterize, results, 'characterize', timeout)
        t2 = time.perf_counter()
        scores = ordered_map(executor, partial(_score, engine, behaviors),
                             range(len(behaviors)), 'score', timeout)
        t3 = time.perf_counter()
    finally:
        # stalled tasks cannot be interrupted; don't block the caller on them
        executor.shutdown(wait=False, cancel_futures=True)

    logger.debug('Evaluated %d individuals on %d workers: eval %.3fs, characterize %.3fs, score %.3fs',
                 len(population), workers, t1 - t0, t2 - t1, t3 - t2)

    updated = engine.update_archive(behaviors, scores)
    return scores, updated
