"""
Settlement engine for a single roulette game.
Drives one game from bet consolidation through every configured round.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from .agents import Agent
from .board import Board
from .models import RouletteType, Slot


logger = logging.getLogger(__name__)


@dataclass
class GameLog:
    """Winning slot of one round."""
    round_number: int
    winning_slot: Slot

    def to_dict(self) -> dict:
        return {'round_number': self.round_number, 'winning_slot': self.winning_slot.to_dict()}


class RouletteGame:
    """
    One simulated game. Owns its board, its agents and its random source;
    nothing here is shared with other games.
    """

    def __init__(
        self,
        game_number: int,
        agents: List[Agent],
        number_of_rounds: int,
        allow_negative_balance: bool = False,
        roulette_type: Optional[RouletteType] = None,
        rng: Optional[random.Random] = None,
        board: Optional[Board] = None
    ):
        """
        Args:
            game_number: Identifier of the game within its batch
            agents: Agents owned by this game (already cloned)
            number_of_rounds: Rounds to play
            allow_negative_balance: Let agents bet beyond their balance
            roulette_type: Wheel type, European when omitted
            rng: Random source for board generation and spins
            board: Pre-built board; generated from roulette_type when omitted

        Raises:
            BoardGenerationError: If the board cannot be generated
        """
        self.game_number = game_number
        self.agents = agents
        self.number_of_rounds = number_of_rounds
        self.allow_negative_balance = allow_negative_balance
        self.roulette_type = roulette_type or RouletteType.EUROPEAN
        self.rng = rng or random.Random()
        self.board = board if board is not None else Board.generate(self.roulette_type, self.rng)
        self.game_logs: List[GameLog] = []

    def play(self) -> 'RouletteGame':
        """
        Play every round of the game.

        Raises:
            SpinError: If the board has no slots
        """
        self.consolidate_bets()
        self.validate_bets()
        for round_number in range(1, self.number_of_rounds + 1):
            self.play_round(round_number)
        logger.debug(f"Game {self.game_number} finished after {self.number_of_rounds} rounds")
        return self

    def play_round(self, round_number: int) -> Slot:
        if self.allow_negative_balance:
            self.allow_all_bets()
        else:
            self.ensure_agent_funds()
        self.collect_bets()
        winning_slot = self.spin()
        self.determine_bet_results(winning_slot)
        self.log_round(round_number, winning_slot)
        self.play_agent_strategies()
        return winning_slot

    def consolidate_bets(self) -> None:
        for agent in self.agents:
            agent.consolidate_bets()

    def validate_bets(self) -> None:
        for agent in self.agents:
            agent.validate_bets(self.roulette_type)

    def allow_all_bets(self) -> None:
        for agent in self.agents:
            agent.allow_all_bets()

    def ensure_agent_funds(self) -> None:
        for agent in self.agents:
            agent.determine_affordable_bets()

    def collect_bets(self) -> None:
        for agent in self.agents:
            agent.collect_bets()

    def spin(self) -> Slot:
        return self.board.spin(self.rng)

    def determine_bet_results(self, winning_slot: Slot) -> None:
        for agent in self.agents:
            agent.settle_bets(winning_slot)

    def log_round(self, round_number: int, winning_slot: Slot) -> None:
        self.game_logs.append(GameLog(round_number, winning_slot))
        for agent in self.agents:
            agent.log_round(round_number)

    def play_agent_strategies(self) -> None:
        for agent in self.agents:
            agent.play_strategy()

    def to_dict(self) -> dict:
        return {
            'game_number': self.game_number,
            'roulette_type': self.roulette_type.value,
            'number_of_rounds': self.number_of_rounds,
            'allow_negative_balance': self.allow_negative_balance,
            'agents': [agent.to_dict() for agent in self.agents],
            'game_logs': [log.to_dict() for log in self.game_logs]
        }
