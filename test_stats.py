#!/usr/bin/env python3
"""
Unit tests for simulation statistics

Run with: python -m pytest test_stats.py -v
"""

import unittest

from roulette_sim.agents import Agent
from roulette_sim.bets import Bet, BetLog, ColorBet, NumberBet
from roulette_sim.board import Board
from roulette_sim.engine import RouletteGame
from roulette_sim.models import BetState, Color
from roulette_sim.stats import (
    BetSignature, Stats, bet_income, format_cents, format_percentage,
    max_loss_streak, win_percentage
)

WON = BetState.WON
LOST = BetState.LOST


def create_logs(*outcomes):
    """Build bet logs from (state, amount) pairs, numbering rounds from 1."""
    return [BetLog(n, state, amount) for n, (state, amount) in enumerate(outcomes, start=1)]


def create_game(game_number, *agents) -> RouletteGame:
    """A finished game holding the given agents; no rounds are played."""
    return RouletteGame(game_number, list(agents), 0, board=Board([]))


def create_agent(name, balance_cents, logs=None, bet=None) -> Agent:
    bet = bet or Bet(ColorBet(Color.RED), 1000, 2)
    bet.bet_logs = logs or []
    return Agent(name=name, balance_cents=balance_cents, strategic_bets=[bet])


class TestBetMetrics(unittest.TestCase):
    """Test per-bet metrics over a log."""

    def setUp(self):
        self.logs = create_logs(
            (LOST, 1000), (WON, 2000), (WON, 1000), (LOST, 1000), (LOST, 2000)
        )

    def test_income(self):
        self.assertEqual(bet_income(self.logs), -1000)

    def test_win_percentage(self):
        self.assertAlmostEqual(win_percentage(self.logs), 0.4)

    def test_loss_streak(self):
        """Trailing losses count."""
        self.assertEqual(max_loss_streak(self.logs), 2)

    def test_empty_log(self):
        self.assertEqual(win_percentage([]), 0.0)
        self.assertEqual(bet_income([]), 0)
        self.assertEqual(max_loss_streak([]), 0)

    def test_inactive_entries_ignored(self):
        logs = create_logs((LOST, 100), (BetState.INACTIVE, 100), (LOST, 100))
        self.assertEqual(bet_income(logs), -200)


class TestFormatting(unittest.TestCase):

    def test_format_cents(self):
        self.assertEqual(format_cents(0), "$0.00")
        self.assertEqual(format_cents(1234), "$12.34")
        self.assertEqual(format_cents(-150), "-$1.50")

    def test_format_percentage(self):
        self.assertEqual(format_percentage(0.4), "40.00%")


class TestStats(unittest.TestCase):
    """Test aggregation over many games."""

    def test_single_game(self):
        logs = create_logs((LOST, 1000), (WON, 2000), (WON, 1000), (LOST, 1000), (LOST, 2000))
        stats = Stats.from_games([create_game(1, create_agent("A", 9000, logs))])

        signature = BetSignature("Color", "Red", 1000, 2)
        self.assertEqual(stats.average_agent_balances, {"A": 9000})
        self.assertAlmostEqual(stats.average_win_percentage["A"][signature], 0.4)
        self.assertEqual(stats.average_income["A"][signature], -1000)
        self.assertEqual(stats.longest_loss_streak["A"][signature], 2)
        self.assertEqual(stats.games_played, 1)

    def test_averages_across_games(self):
        games = [
            create_game(1, create_agent("A", 101, create_logs((WON, 1000), (LOST, 1000)))),
            create_game(2, create_agent("A", 100, create_logs((WON, 1000), (WON, 1000)))),
            create_game(3, create_agent("A", 100, create_logs((LOST, 1000), (LOST, 1000), (LOST, 1000)))),
        ]
        stats = Stats.from_games(games)
        signature = BetSignature("Color", "Red", 1000, 2)

        self.assertEqual(stats.average_agent_balances["A"], 100)
        self.assertAlmostEqual(stats.average_win_percentage["A"][signature], 0.5)
        # (0 + 2000 - 3000) / 3 truncates toward zero
        self.assertEqual(stats.average_income["A"][signature], -333)
        self.assertEqual(stats.longest_loss_streak["A"][signature], 3)

    def test_negative_average_truncates_toward_zero(self):
        games = [create_game(1, create_agent("A", -101)), create_game(2, create_agent("A", -100))]
        self.assertEqual(Stats.from_games(games).average_agent_balances["A"], -100)

    def test_order_independence(self):
        games = [
            create_game(n, create_agent("A", 1000 * n, create_logs(*([(WON, 300)] * n + [(LOST, 700)]))))
            for n in range(1, 6)
        ]
        forward = Stats.from_games(games).to_dict()
        backward = Stats.from_games(list(reversed(games))).to_dict()
        self.assertEqual(forward, backward)

    def test_signatures_keep_bets_apart(self):
        agent = Agent(name="B", balance_cents=0, strategic_bets=[
            Bet(ColorBet(Color.RED), 1000, 2, bet_logs=create_logs((WON, 1000))),
            Bet(ColorBet(Color.RED), 1000, 3, bet_logs=create_logs((LOST, 1000))),
            Bet(NumberBet(-1), 100, 1),
        ])
        rows = Stats.from_games([create_game(1, agent)]).bet_statistics()

        self.assertEqual(len(rows), 3)
        self.assertEqual({row['bet_value'] for row in rows}, {"Red", "00"})
        unplayed = next(row for row in rows if row['bet_type'] == "Number")
        self.assertEqual(unplayed['win_percentage'], 0.0)
        self.assertEqual(unplayed['average_bet_income'], 0)

    def test_no_games(self):
        stats = Stats.from_games([], games_failed=4)
        self.assertEqual(stats.games_played, 0)
        self.assertEqual(stats.games_failed, 4)
        self.assertEqual(stats.bet_statistics(), [])


class TestStatsOutput(unittest.TestCase):
    """Test dictionary and console output."""

    def setUp(self):
        logs = create_logs((LOST, 1000), (WON, 2000))
        self.stats = Stats.from_games(
            [create_game(1, create_agent("Martingale Red", -1000, logs))],
            games_failed=3
        )

    def test_to_dict(self):
        data = self.stats.to_dict()
        self.assertEqual(data['average_agent_balances'], {"Martingale Red": -1000})
        self.assertEqual(data['games_played'], 1)
        self.assertEqual(data['games_failed'], 3)
        self.assertEqual(data['bet_statistics'], [{
            'agent_name': "Martingale Red",
            'bet_type': "Color",
            'bet_value': "Red",
            'initial_amount_cents': 1000,
            'progression_factor': 2,
            'win_percentage': 0.5,
            'average_bet_income': 1000,
            'longest_loss_streak': 1,
        }])

    def test_tables(self):
        balances, bets = self.stats.to_tables()
        self.assertEqual(balances.row_count, 1)
        self.assertEqual(bets.row_count, 1)

    def test_str(self):
        text = str(self.stats)
        self.assertIn("Average Agent Balances", text)
        self.assertIn("Bet Statistics", text)
        self.assertIn("Martingale Red", text)
        self.assertIn("-$10.00", text)
        self.assertIn("3 games failed to run", text)


if __name__ == '__main__':
    unittest.main(verbosity=2)
