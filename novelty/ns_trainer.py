# novelty/ns_trainer.py
"""
Novelty Search Trainer

Population-based evolutionary loop that selects on behavioral novelty
instead of task fitness:
  1. Random initialization of the population
  2. Evaluation: run every individual, characterize its behavior,
     score novelty against the batch and the archive
  3. Selection: tournaments on novelty score
  4. Mutation: Gaussian perturbation of policy weights
"""

import time
import numpy as np
import pandas as pd
import torch
from dataclasses import dataclass, field
from functools import partial
from tqdm import tqdm as progress_bar
from typing import Any, Callable, Dict, List, Optional, Union

from core.interfaces import NoveltyConfig
from maze.model import Maze, load_maze
from maze.simulator import behavior_characterization, simulate
from novelty.evaluator import DEFAULT_TIMEOUT, evaluate_population
from novelty.novelty_archive import NoveltySearch
from predictors import MazeController, as_controller_fn


@dataclass
class ExperimentResult:
    final_population: List[Any]
    engine: NoveltySearch
    history: pd.DataFrame
    generations: int
    duration: float                    # seconds
    archive: List[List[float]] = field(default_factory=list)

    @property
    def max_novelty_scores(self) -> List[float]:
        return self.history['max_novelty'].tolist()

    @property
    def archive_size_history(self) -> List[int]:
        return self.history['archive_size'].tolist()


class NoveltySearchTrainer:
    """
    Generational novelty search over torch policies.

    Args:
        policy_factory: Callable that returns a new policy network
        eval_fn: Callable(policy) -> evaluation result, characterized by the engine
        engine: NoveltySearch instance holding the initial archive and settings
        mutation_rate: Probability that a selected individual is mutated
        mutation_sigma: Standard deviation of the Gaussian weight noise
        tournament_size: Individuals drawn per tournament
        seed: Random seed for initialization, selection and mutation
        max_workers: Evaluation pool size (defaults to CPU count)
        timeout: Per-individual evaluation limit in seconds
    """

    def __init__(
        self,
        policy_factory: Callable[[], torch.nn.Module],
        eval_fn: Callable[[torch.nn.Module], Any],
        engine: NoveltySearch,
        mutation_rate: float = 0.3,
        mutation_sigma: float = 0.5,
        tournament_size: int = 3,
        seed: int = 42,
        max_workers: Optional[int] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ):
        self.policy_factory = policy_factory
        self.eval_fn = eval_fn
        self.engine = engine
        self.mutation_rate = mutation_rate
        self.mutation_sigma = mutation_sigma
        self.tournament_size = tournament_size
        self.max_workers = max_workers
        self.timeout = timeout
        self.rng = np.random.default_rng(seed)
        self.generator = torch.Generator().manual_seed(seed)
        torch.manual_seed(seed)

        self.population: List[torch.nn.Module] = []
        self.generation = 0
        self.history: List[Dict[str, float]] = []

    def initialize(self, population_size: int):
        self.population = [self.policy_factory() for _ in range(population_size)]
        self.generation = 0
        self.history = []

    def mutate(self, parent: torch.nn.Module) -> torch.nn.Module:
        child = self.policy_factory()
        child.load_state_dict(parent.state_dict())
        with torch.no_grad():
            for param in child.parameters():
                noise = torch.randn(param.shape, generator=self.generator) * self.mutation_sigma
                param.add_(noise.to(param.dtype))
        return child

    def select(self, scores: List[float], n: int) -> List[int]:
        """Tournament selection; returns indices into the current population."""
        scores = np.asarray(scores, dtype=float)
        contenders = self.rng.integers(0, len(scores), size=(n, self.tournament_size))
        winners = np.argmax(scores[contenders], axis=1)
        return contenders[np.arange(n), winners].tolist()

    def step(self) -> Dict[str, float]:
        """
        Perform one generation.

        Returns:
            Stats for the evaluated generation
        """
        if not self.population:
            raise RuntimeError('Population is empty, call initialize() first')

        scores, self.engine = evaluate_population(
            self.engine, self.population, self.eval_fn,
            max_workers=self.max_workers, timeout=self.timeout,
        )
        self.generation += 1
        stats = {
            'generation': self.generation,
            'max_novelty': float(np.max(scores)),
            'avg_novelty': float(np.mean(scores)),
            'archive_size': len(self.engine),
        }
        self.history.append(stats)

        selected = [self.population[i] for i in self.select(scores, len(self.population))]
        self.population = [
            self.mutate(ind) if self.rng.random() < self.mutation_rate else ind
            for ind in selected
        ]
        return stats

    def train(self, generations: int = 250, log_interval: int = 10, verbose: bool = True) -> ExperimentResult:
        """
        Run the full novelty search loop.

        Args:
            generations: Number of generations to run
            log_interval: How often to print progress
            verbose: Whether to show progress

        Returns:
            ExperimentResult with the final population, archive and history
        """
        start = time.perf_counter()
        wrapper = progress_bar if verbose else (lambda x: x)

        for _ in wrapper(range(generations)):
            stats = self.step()
            if verbose and stats["generation"] % log_interval == 0:
                print(
                    f"Generation {stats['generation']}: "
                    f"max novelty={stats['max_novelty']:.4f}, "
                    f"avg novelty={stats['avg_novelty']:.4f}, "
                    f"archive size={stats['archive_size']}"
                )

        duration = time.perf_counter() - start
        if verbose:
            print(f"\nNovelty search complete in {duration:.1f}s")
            print(f"Final archive size: {len(self.engine)}")

        return ExperimentResult(
            final_population=list(self.population),
            engine=self.engine,
            history=pd.DataFrame(
                self.history, columns=['generation', 'max_novelty', 'avg_novelty', 'archive_size']),
            generations=self.generation,
            duration=duration,
            archive=self.engine.archive_stats()['archive'],
        )


def _evaluate_in_maze(maze: Maze, policy: torch.nn.Module):
    return simulate(maze, as_controller_fn(policy))


def run_maze_experiment(
    maze: Union[str, Maze] = 'medium',
    generations: int = 250,
    population_size: int = 150,
    hidden_size: int = 10,
    mutation_rate: float = 0.3,
    mutation_power: float = 0.5,
    k_nearest: int = 15,
    archive_threshold: float = 6.0,
    min_dist_to_archive: float = 3.0,
    seed: int = 42,
    log_interval: int = 10,
    verbose: bool = True,
    config: Optional[NoveltyConfig] = None,
    **trainer_kwargs,
) -> ExperimentResult:
    """
    Novelty search on maze navigation with MLP controllers.

    Behaviors are final robot positions unless ``config`` says otherwise.
    When ``config`` is given it replaces the k_nearest, archive_threshold and
    min_dist_to_archive arguments; its behavior function receives a
    SimulationResult.
    """
    maze_env = load_maze(maze)
    if config is None:
        config = NoveltyConfig(
            k_nearest=k_nearest,
            archive_threshold=archive_threshold,
            min_dist_to_archive=min_dist_to_archive,
            behavior_characterization=behavior_characterization,
        )
    engine = config.build()
    trainer = NoveltySearchTrainer(
        policy_factory=partial(MazeController, hidden_size=hidden_size),
        eval_fn=partial(_evaluate_in_maze, maze_env),
        engine=engine,
        mutation_rate=mutation_rate,
        mutation_sigma=mutation_power,
        seed=seed,
        **trainer_kwargs,
    )
    trainer.initialize(population_size)
    return trainer.train(generations=generations, log_interval=log_interval, verbose=verbose)
