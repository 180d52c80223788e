#!/usr/bin/env python3
"""
Roulette Strategy Simulator - Command Line Interface

Plays many independent roulette games with agents following fixed betting
strategies (martingale-style progressions included) and prints aggregate
statistics per agent and per bet.
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from roulette_sim.loader import read_agents_file
from roulette_sim.models import GameConfig, RouletteSimError
from roulette_sim.runner import run_simulation
from roulette_sim.stats import Stats


DEFAULT_GAME_CONFIG = Path("res/game.json")
DEFAULT_AGENTS = Path("res/agents.json")


def setup_logging(level: int = logging.INFO) -> None:
    """Setup logging configuration."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulate roulette betting strategies")
    parser.add_argument("--game", type=Path, default=DEFAULT_GAME_CONFIG,
                        help="Game configuration JSON file")
    parser.add_argument("--agents", type=Path, default=DEFAULT_AGENTS,
                        help="Agent roster JSON file")
    parser.add_argument("--workers", type=int, help="Maximum parallel games")
    parser.add_argument("--batch-size", type=int, help="Games dispatched per batch")
    parser.add_argument("--seed", type=int, help="Base random seed")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def apply_overrides(config: GameConfig, args: argparse.Namespace) -> GameConfig:
    """
    Command line options override the file. The config is rebuilt so the
    overrides go through the same validation as file values.

    Raises:
        DeserializationError: If an override is out of range
    """
    overrides = {
        'max_workers': args.workers,
        'batch_size': args.batch_size,
        'seed': args.seed,
    }
    return dataclasses.replace(
        config, **{key: value for key, value in overrides.items() if value is not None}
    )


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    console = console or Console()
    logger = logging.getLogger("roulette_simulator")

    try:
        config = apply_overrides(GameConfig.from_file(args.game), args)
        agents = read_agents_file(args.agents)
    except RouletteSimError as e:
        logger.error(str(e))
        console.print(f"[red]ERROR: {e}[/red]")
        return 1

    console.print(Panel.fit(
        f"[bold cyan]Roulette Strategy Simulator[/bold cyan]\n"
        f"[dim]{config.number_of_games} games x {config.number_of_rounds} rounds, "
        f"{config.roulette_type.value} wheel, {len(agents)} agents[/dim]",
        border_style="cyan"
    ))

    result = run_simulation(config, agents)
    stats = Stats.from_games(result.games, games_failed=result.failed)
    stats.render(console)

    if not result.failed:
        console.print(f"[green]All {result.requested} games completed in {result.duration_seconds:.2f}s[/green]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
