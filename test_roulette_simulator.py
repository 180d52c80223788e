#!/usr/bin/env python3
"""
Tests for the command line interface

Run with: python -m pytest test_roulette_simulator.py -v
"""

import io
import json
import tempfile
import unittest
from pathlib import Path

from rich.console import Console

from roulette_sim.models import GameConfig
from roulette_simulator import apply_overrides, build_parser, main


class TestCommandLine(unittest.TestCase):
    """Test roulette_simulator.main end to end."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        root = Path(self.tmp.name)

        self.game_file = root / 'game.json'
        self.game_file.write_text(json.dumps({
            "number_of_rounds": 20,
            "number_of_games": 6,
            "allow_negative_balance": True,
            "roulette_type": "American",
        }), encoding='utf-8')

        self.agents_file = root / 'agents.json'
        self.agents_file.write_text(json.dumps([{
            "name": "Corner Player",
            "balance_cents": 5000,
            "strategic_bets": [
                {"bet_value": {"AdjacentNumbers": [1, 2, 4, 5]}, "amount_cents": 100, "progression_factor": 1}
            ]
        }]), encoding='utf-8')

        self.output = io.StringIO()
        self.console = Console(file=self.output, width=140)

    def run_main(self, *extra):
        argv = ["--game", str(self.game_file), "--agents", str(self.agents_file), *extra]
        return main(argv, console=self.console)

    def test_run(self):
        self.assertEqual(self.run_main("--seed", "3", "--workers", "2", "--batch-size", "4"), 0)

        text = self.output.getvalue()
        self.assertIn("Roulette Strategy Simulator", text)
        self.assertIn("Corner Player", text)
        self.assertIn("[1 2 4 5]", text)
        self.assertIn("All 6 games completed", text)

    def test_missing_file(self):
        self.agents_file.unlink()
        self.assertEqual(self.run_main(), 1)
        self.assertIn("ERROR", self.output.getvalue())

    def test_invalid_agents(self):
        self.agents_file.write_text(json.dumps([{"name": "X", "strategic_bets": []}]), encoding='utf-8')
        self.assertEqual(self.run_main(), 1)

    def test_invalid_overrides(self):
        """Out-of-range command line overrides are configuration errors."""
        self.assertEqual(self.run_main("--workers", "0"), 1)
        self.assertEqual(self.run_main("--batch-size", "-5"), 1)
        self.assertIn("max_workers must be positive", self.output.getvalue())

    def test_overrides_do_not_touch_file_values(self):
        args = build_parser().parse_args(["--seed", "9"])
        config = GameConfig(number_of_rounds=5, number_of_games=2, batch_size=4)

        updated = apply_overrides(config, args)
        self.assertEqual(updated.seed, 9)
        self.assertEqual(updated.batch_size, 4)
        self.assertIsNone(config.seed)

    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        self.assertEqual(args.game, Path("res/game.json"))
        self.assertIsNone(args.seed)
        self.assertFalse(args.verbose)


if __name__ == '__main__':
    unittest.main(verbosity=2)
