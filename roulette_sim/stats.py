"""
Statistics over completed games.

Per-agent average balances and, per bet signature, average win percentage,
average income and longest losing streak.
"""

import io
import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from .bets import Bet, BetLog
from .engine import RouletteGame
from .models import BetState


@dataclass(frozen=True, order=True)
class BetSignature:
    """Groups equivalent bets across agents and games."""
    bet_type: str
    bet_value: str
    initial_amount_cents: int
    progression_factor: int

    @classmethod
    def from_bet(cls, bet: Bet) -> 'BetSignature':
        return cls(
            bet_type=bet.bet_value.get_type(),
            bet_value=bet.bet_value.get_value_string(),
            initial_amount_cents=bet.initial_amount_cents,
            progression_factor=bet.progression_factor
        )


def win_percentage(logs: Sequence[BetLog]) -> float:
    """Share of logged rounds that were won."""
    if not logs:
        return 0.0
    wins = sum(1 for log in logs if log.bet_state == BetState.WON)
    return wins / len(logs)


def bet_income(logs: Iterable[BetLog]) -> int:
    """Stakes won minus stakes lost."""
    income = 0
    for log in logs:
        if log.bet_state == BetState.WON:
            income += log.amount_cents
        elif log.bet_state == BetState.LOST:
            income -= log.amount_cents
    return income


def max_loss_streak(logs: Iterable[BetLog]) -> int:
    longest = 0
    current = 0
    for log in logs:
        if log.bet_state == BetState.LOST:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def _int_mean(values: List[int]) -> int:
    """Integer mean truncated toward zero."""
    total = sum(values)
    quotient = abs(total) // len(values)
    return quotient if total >= 0 else -quotient


def format_cents(value: int) -> str:
    sign = "-" if value < 0 else ""
    dollars, cents = divmod(abs(value), 100)
    return f"{sign}${dollars}.{cents:02d}"


def format_percentage(value: float) -> str:
    return f"{value * 100:.2f}%"


@dataclass
class Stats:
    """Aggregate results of a simulation run."""
    average_agent_balances: Dict[str, int] = field(default_factory=dict)
    average_win_percentage: Dict[str, Dict[BetSignature, float]] = field(default_factory=dict)
    average_income: Dict[str, Dict[BetSignature, int]] = field(default_factory=dict)
    longest_loss_streak: Dict[str, Dict[BetSignature, int]] = field(default_factory=dict)
    games_played: int = 0
    games_failed: int = 0

    @classmethod
    def from_games(cls, games: Iterable[RouletteGame], games_failed: int = 0) -> 'Stats':
        """
        Reduce completed games. The result does not depend on game order.

        Args:
            games: Completed games
            games_failed: Games that could not be played, for reporting
        """
        balances: Dict[str, List[int]] = defaultdict(list)
        percentages: Dict[str, Dict[BetSignature, List[float]]] = defaultdict(lambda: defaultdict(list))
        incomes: Dict[str, Dict[BetSignature, List[int]]] = defaultdict(lambda: defaultdict(list))
        streaks: Dict[str, Dict[BetSignature, int]] = defaultdict(dict)
        games_played = 0

        for game in games:
            games_played += 1
            for agent in game.agents:
                balances[agent.name].append(agent.balance_cents)
                for bet in agent.strategic_bets:
                    signature = BetSignature.from_bet(bet)
                    percentages[agent.name][signature].append(win_percentage(bet.bet_logs))
                    incomes[agent.name][signature].append(bet_income(bet.bet_logs))
                    streak = max_loss_streak(bet.bet_logs)
                    streaks[agent.name][signature] = max(streak, streaks[agent.name].get(signature, 0))

        return cls(
            average_agent_balances={
                name: _int_mean(values) for name, values in balances.items()
            },
            average_win_percentage={
                name: {sig: math.fsum(values) / len(values) for sig, values in by_bet.items()}
                for name, by_bet in percentages.items()
            },
            average_income={
                name: {sig: _int_mean(values) for sig, values in by_bet.items()}
                for name, by_bet in incomes.items()
            },
            longest_loss_streak={name: dict(by_bet) for name, by_bet in streaks.items()},
            games_played=games_played,
            games_failed=games_failed
        )

    def bet_statistics(self) -> List[dict]:
        """One flat row per agent and bet signature, sorted for display."""
        rows = []
        for agent_name in sorted(self.average_win_percentage):
            for signature in sorted(self.average_win_percentage[agent_name]):
                rows.append({
                    'agent_name': agent_name,
                    'bet_type': signature.bet_type,
                    'bet_value': signature.bet_value,
                    'initial_amount_cents': signature.initial_amount_cents,
                    'progression_factor': signature.progression_factor,
                    'win_percentage': self.average_win_percentage[agent_name][signature],
                    'average_bet_income': self.average_income[agent_name][signature],
                    'longest_loss_streak': self.longest_loss_streak[agent_name][signature],
                })
        return rows

    def to_dict(self) -> dict:
        return {
            'average_agent_balances': dict(sorted(self.average_agent_balances.items())),
            'bet_statistics': self.bet_statistics(),
            'games_played': self.games_played,
            'games_failed': self.games_failed
        }

    def to_tables(self) -> List[Table]:
        """Rich tables for console display."""
        balances = Table(title="Average Agent Balances")
        balances.add_column("Agent", style="bold")
        balances.add_column("Average Balance", justify="right")
        for name, balance in sorted(self.average_agent_balances.items()):
            color = "green" if balance >= 0 else "red"
            balances.add_row(name, f"[{color}]{format_cents(balance)}[/{color}]")

        bets = Table(title="Bet Statistics")
        bets.add_column("Agent", style="bold")
        bets.add_column("Bet Type")
        bets.add_column("Bet Value")
        bets.add_column("Stake", justify="right")
        bets.add_column("Progression", justify="right")
        bets.add_column("Win %", justify="right")
        bets.add_column("Average Income", justify="right")
        bets.add_column("Longest Loss Streak", justify="right")
        for row in self.bet_statistics():
            income = row['average_bet_income']
            color = "green" if income >= 0 else "red"
            bets.add_row(
                row['agent_name'],
                row['bet_type'],
                row['bet_value'],
                format_cents(row['initial_amount_cents']),
                f"x{row['progression_factor']}",
                format_percentage(row['win_percentage']),
                f"[{color}]{format_cents(income)}[/{color}]",
                str(row['longest_loss_streak'])
            )
        return [balances, bets]

    def render(self, console: Optional[Console] = None) -> None:
        console = console or Console()
        for table in self.to_tables():
            console.print(table)
            console.print()
        if self.games_failed:
            console.print(f"[yellow]{self.games_failed} games failed to run[/yellow]")

    def __str__(self) -> str:
        console = Console(file=io.StringIO(), width=140)
        self.render(console)
        return console.file.getvalue()
