"""
Batch runner for many independent games.

Games are dispatched to a bounded thread pool in fixed-size batches. A game
that raises is logged, counted and left out of the results; the rest of the
batch carries on.
"""

import logging
import random
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from .agents import Agent
from .engine import RouletteGame
from .models import GameConfig, RouletteSimError


logger = logging.getLogger(__name__)


# Builds an unplayed game from its number and its own random source
GameFactory = Callable[[int, random.Random], RouletteGame]


@dataclass
class BatchResult:
    """Games that completed, plus the failures that were left out."""
    games: List[RouletteGame] = field(default_factory=list)
    requested: int = 0
    failed_games: Dict[int, str] = field(default_factory=dict)
    duration_seconds: float = 0.0

    @property
    def failed(self) -> int:
        return len(self.failed_games)


def make_game_factory(config: GameConfig, agents: Sequence[Agent]) -> GameFactory:
    """Closure building each game with its own clone of the agent roster."""

    def factory(game_number: int, rng: random.Random) -> RouletteGame:
        return RouletteGame(
            game_number=game_number,
            agents=[agent.clone() for agent in agents],
            number_of_rounds=config.number_of_rounds,
            allow_negative_balance=config.allow_negative_balance,
            roulette_type=config.roulette_type,
            rng=rng
        )

    return factory


def _play_game(factory: GameFactory, game_number: int, seed: Optional[int]) -> RouletteGame:
    """Worker: build and play one game."""
    rng = random.Random(seed)
    game = factory(game_number, rng)
    return game.play()


class GameRunner:
    """
    Runs batches of games in parallel.

    Usage:
        runner = GameRunner(max_workers=8, batch_size=1000)
        result = runner.run(10_000, make_game_factory(config, agents), seed=42)
    """

    def __init__(self, max_workers: Optional[int] = None, batch_size: Optional[int] = None):
        """
        Args:
            max_workers: Thread pool size (executor default when None)
            batch_size: Games dispatched per batch (all at once when None)
        """
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be positive")
        if batch_size is not None and batch_size < 1:
            raise ValueError("batch_size must be positive")
        self.max_workers = max_workers
        self.batch_size = batch_size

    def run(self, number_of_games: int, factory: GameFactory, seed: Optional[int] = None) -> BatchResult:
        """
        Play games 1..number_of_games.

        Args:
            number_of_games: Games to play
            factory: Per-game constructor
            seed: Base seed; game i is seeded with seed + i

        Returns:
            BatchResult with completed games and failure count
        """
        start = time.perf_counter()
        result = BatchResult(requested=number_of_games)
        game_numbers = list(range(1, number_of_games + 1))
        batch_size = self.batch_size or max(1, number_of_games)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            for offset in range(0, number_of_games, batch_size):
                batch = game_numbers[offset:offset + batch_size]
                futures: Dict[Future, int] = {
                    executor.submit(
                        _play_game, factory, game_number,
                        None if seed is None else seed + game_number
                    ): game_number
                    for game_number in batch
                }
                self._collect(futures, result)
                logger.info(
                    f"Batch {offset // batch_size + 1}: "
                    f"{offset + len(batch)}/{number_of_games} games dispatched"
                )

        # Completion order depends on scheduling
        result.games.sort(key=lambda game: game.game_number)
        result.duration_seconds = time.perf_counter() - start

        if result.failed:
            logger.warning(f"{result.failed} of {number_of_games} games failed to run")
        logger.info(f"Played {len(result.games)} games in {result.duration_seconds:.2f}s")
        return result

    @staticmethod
    def _collect(futures: Dict[Future, int], result: BatchResult) -> None:
        for future in as_completed(futures):
            game_number = futures[future]
            try:
                result.games.append(future.result())
            except RouletteSimError as e:
                logger.error(f"Game {game_number} failed: {e}")
                result.failed_games[game_number] = str(e)
            except Exception as e:
                logger.exception(f"Worker for game {game_number} crashed")
                result.failed_games[game_number] = f"{type(e).__name__}: {e}"


def run_simulation(config: GameConfig, agents: Sequence[Agent]) -> BatchResult:
    """Run every game described by the configuration."""
    logger.info(
        f"Running {config.number_of_games} {config.roulette_type.value} games "
        f"of {config.number_of_rounds} rounds for {len(agents)} agents"
    )
    runner = GameRunner(max_workers=config.max_workers, batch_size=config.batch_size)
    return runner.run(config.number_of_games, make_game_factory(config, agents), seed=config.seed)
