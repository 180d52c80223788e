"""
Agents and their betting strategies.

An agent owns a list of strategic bets and plays all of them every round,
following a martingale-style progression per bet.
"""

import copy
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .bets import Bet, BetValue
from .models import BetState, RouletteType, Slot


@dataclass
class AgentLog:
    """Agent balance at the end of a round."""
    round_number: int
    balance_cents: int

    def to_dict(self) -> dict:
        return {'round_number': self.round_number, 'balance_cents': self.balance_cents}


@dataclass
class Agent:
    """A player with a bankroll and a fixed set of strategic bets."""
    name: str
    balance_cents: int
    strategic_bets: List[Bet] = field(default_factory=list)
    agent_logs: List[AgentLog] = field(default_factory=list)

    def clone(self) -> 'Agent':
        """Independent copy for a new game."""
        return copy.deepcopy(self)

    def consolidate_bets(self) -> None:
        """
        Merge bets sharing the same value and progression factor.
        Both current and initial stakes are summed; first occurrence keeps
        its position. Inactive bets are left untouched.
        """
        merged: Dict[Tuple[BetValue, int], Bet] = {}
        consolidated: List[Bet] = []

        for bet in self.strategic_bets:
            if bet.bet_state == BetState.INACTIVE:
                consolidated.append(bet)
                continue
            existing = merged.get(bet.consolidation_key)
            if existing is None:
                merged[bet.consolidation_key] = bet
                consolidated.append(bet)
            else:
                existing.amount_cents += bet.amount_cents
                existing.initial_amount_cents += bet.initial_amount_cents

        self.strategic_bets = consolidated

    def validate_bets(self, roulette_type: RouletteType) -> None:
        for bet in self.strategic_bets:
            if bet.bet_state == BetState.ACTIVE:
                bet.validate(roulette_type)

    def _placeable_bets(self) -> List[Bet]:
        return [bet for bet in self.strategic_bets if bet.placeable]

    def allow_all_bets(self) -> None:
        for bet in self._placeable_bets():
            bet.bet_state = BetState.ACTIVE

    def determine_affordable_bets(self) -> None:
        """
        Activate bets in order while their running stake total stays within
        the balance; every bet past that point is inactive this round.
        """
        total_cents = 0
        for bet in self._placeable_bets():
            total_cents += bet.amount_cents
            if total_cents <= self.balance_cents:
                bet.bet_state = BetState.ACTIVE
            else:
                bet.bet_state = BetState.INACTIVE

    def collect_bets(self) -> int:
        """Debit every active stake. Returns the total collected."""
        collected = sum(
            bet.amount_cents for bet in self.strategic_bets
            if bet.bet_state == BetState.ACTIVE
        )
        self.balance_cents -= collected
        return collected

    def settle_bets(self, slot: Slot) -> int:
        """Resolve active bets and credit winnings. Returns the total credited."""
        credited = sum(bet.settle(slot) for bet in self.strategic_bets)
        self.balance_cents += credited
        return credited

    def log_round(self, round_number: int) -> None:
        self.agent_logs.append(AgentLog(round_number, self.balance_cents))
        for bet in self.strategic_bets:
            bet.log_round(round_number)

    def play_strategy(self) -> None:
        for bet in self.strategic_bets:
            bet.progress()

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'balance_cents': self.balance_cents,
            'strategic_bets': [bet.to_dict() for bet in self.strategic_bets],
            'agent_logs': [log.to_dict() for log in self.agent_logs]
        }
