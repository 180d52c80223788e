"""
Bet definitions, validation and settlement rules.

Every bet value is a frozen dataclass implementing the abstract BetValue
interface, so a new bet kind cannot be instantiated until it defines how it
is validated, settled and reported.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar, FrozenSet, List, Optional, Tuple

from .models import (
    DOUBLE_ZERO, BetState, Color, Column, Dozen, EvenOdd, Half, RouletteType,
    Row, Slot
)


# ============================================================================
# ADJACENT NUMBER TABLES
# ============================================================================

# Splits touching a zero pocket
ZERO_SPLITS = {
    RouletteType.EUROPEAN: frozenset({
        frozenset({0, 1}), frozenset({0, 2}), frozenset({0, 3}),
    }),
    RouletteType.AMERICAN: frozenset({
        frozenset({0, 1}), frozenset({0, 2}),
        frozenset({DOUBLE_ZERO, 0}), frozenset({DOUBLE_ZERO, 2}), frozenset({DOUBLE_ZERO, 3}),
    }),
}

# Three-number baskets, always touching a zero pocket
BASKETS = {
    RouletteType.EUROPEAN: frozenset({
        frozenset({0, 1, 2}), frozenset({0, 2, 3}),
    }),
    RouletteType.AMERICAN: frozenset({
        frozenset({0, 1, 2}), frozenset({DOUBLE_ZERO, 0, 2}), frozenset({DOUBLE_ZERO, 2, 3}),
    }),
}

# Payout multipliers for 2, 3 and 4 adjacent numbers, stake included
ADJACENT_PAYOUTS = {2: 18, 3: 12, 4: 9}


def _street(n: int) -> int:
    return (n - 1) // 3


def is_split(numbers: FrozenSet[int], roulette_type: RouletteType) -> bool:
    smaller, larger = sorted(numbers)
    if smaller <= 0:
        return numbers in ZERO_SPLITS[roulette_type]
    if larger - smaller == 3:
        return True
    return larger - smaller == 1 and _street(smaller) == _street(larger)


def is_basket(numbers: FrozenSet[int], roulette_type: RouletteType) -> bool:
    return numbers in BASKETS[roulette_type]


def is_corner(numbers: FrozenSet[int]) -> bool:
    m = min(numbers)
    if m % 3 == 0:
        return False
    return numbers == {m, m + 1, m + 3, m + 4}


def is_valid_number(n: int, roulette_type: RouletteType) -> bool:
    if n == DOUBLE_ZERO:
        return roulette_type == RouletteType.AMERICAN
    return 0 <= n <= 36


# ============================================================================
# BET VALUES
# ============================================================================

class BetValue(ABC):
    """What a bet is placed on."""

    type_name: ClassVar[str]

    @abstractmethod
    def is_valid(self, roulette_type: RouletteType) -> bool:
        """Whether the bet can legally be placed on this wheel."""

    @abstractmethod
    def wins(self, slot: Slot) -> bool:
        """Whether the winning slot pays this bet."""

    @property
    @abstractmethod
    def payout_multiplier(self) -> int:
        """Credit per staked cent on a win, stake included."""

    @abstractmethod
    def get_value_string(self) -> str:
        """Human-readable value, unique within the bet type."""

    def get_type(self) -> str:
        return self.type_name

    def to_dict(self) -> dict:
        return {self.type_name: self._json_value()}

    @abstractmethod
    def _json_value(self):
        pass


@dataclass(frozen=True)
class NumberBet(BetValue):
    """Straight-up bet on a single number, -1 being 00."""
    number: int
    type_name: ClassVar[str] = "Number"

    def is_valid(self, roulette_type: RouletteType) -> bool:
        return is_valid_number(self.number, roulette_type)

    def wins(self, slot: Slot) -> bool:
        return slot.number == self.number

    @property
    def payout_multiplier(self) -> int:
        return 36

    def get_value_string(self) -> str:
        return "00" if self.number == DOUBLE_ZERO else str(self.number)

    def _json_value(self):
        return self.number


@dataclass(frozen=True)
class ColorBet(BetValue):
    color: Color
    type_name: ClassVar[str] = "Color"

    def is_valid(self, roulette_type: RouletteType) -> bool:
        return self.color in (Color.RED, Color.BLACK)

    def wins(self, slot: Slot) -> bool:
        return slot.color == self.color

    @property
    def payout_multiplier(self) -> int:
        return 2

    def get_value_string(self) -> str:
        return self.color.value

    def _json_value(self):
        return self.color.value


@dataclass(frozen=True)
class ColumnBet(BetValue):
    column: Column
    type_name: ClassVar[str] = "Column"

    def is_valid(self, roulette_type: RouletteType) -> bool:
        return True

    def wins(self, slot: Slot) -> bool:
        return slot.column == self.column

    @property
    def payout_multiplier(self) -> int:
        return 12

    def get_value_string(self) -> str:
        return str(self.column.value)

    def _json_value(self):
        return self.column.value


@dataclass(frozen=True)
class DoubleColumnBet(BetValue):
    """Two columns side by side (six numbers)."""
    columns: Tuple[Column, Column]
    type_name: ClassVar[str] = "DoubleColumn"

    def __post_init__(self):
        # Order does not change the bet
        object.__setattr__(self, 'columns', tuple(sorted(self.columns, key=lambda c: c.value)))

    def is_valid(self, roulette_type: RouletteType) -> bool:
        first, second = self.columns
        return abs(first.value - second.value) == 1

    def wins(self, slot: Slot) -> bool:
        return slot.column in self.columns

    @property
    def payout_multiplier(self) -> int:
        return 6

    def get_value_string(self) -> str:
        first, second = self.columns
        return f"[{first.value} {second.value}]"

    def _json_value(self):
        return [c.value for c in self.columns]


@dataclass(frozen=True)
class DozenBet(BetValue):
    dozen: Dozen
    type_name: ClassVar[str] = "Dozen"

    def is_valid(self, roulette_type: RouletteType) -> bool:
        return True

    def wins(self, slot: Slot) -> bool:
        return slot.dozen == self.dozen

    @property
    def payout_multiplier(self) -> int:
        return 3

    def get_value_string(self) -> str:
        return str(self.dozen.value)

    def _json_value(self):
        return self.dozen.value


@dataclass(frozen=True)
class EvenOddBet(BetValue):
    even_odd: EvenOdd
    type_name: ClassVar[str] = "EvenOdd"

    def is_valid(self, roulette_type: RouletteType) -> bool:
        return True

    def wins(self, slot: Slot) -> bool:
        return slot.even_odd == self.even_odd

    @property
    def payout_multiplier(self) -> int:
        return 2

    def get_value_string(self) -> str:
        return self.even_odd.value

    def _json_value(self):
        return self.even_odd.value


@dataclass(frozen=True)
class HalfBet(BetValue):
    half: Half
    type_name: ClassVar[str] = "Half"

    def is_valid(self, roulette_type: RouletteType) -> bool:
        return True

    def wins(self, slot: Slot) -> bool:
        return slot.half == self.half

    @property
    def payout_multiplier(self) -> int:
        return 2

    def get_value_string(self) -> str:
        return str(self.half.value)

    def _json_value(self):
        return self.half.value


@dataclass(frozen=True)
class RowBet(BetValue):
    row: Row
    type_name: ClassVar[str] = "Row"

    def is_valid(self, roulette_type: RouletteType) -> bool:
        return True

    def wins(self, slot: Slot) -> bool:
        return slot.row == self.row

    @property
    def payout_multiplier(self) -> int:
        return 3

    def get_value_string(self) -> str:
        return str(self.row.value)

    def _json_value(self):
        return self.row.value


@dataclass(frozen=True)
class AdjacentNumbersBet(BetValue):
    """Split, basket or corner bet on 2-4 neighbouring numbers."""
    numbers: Tuple[int, ...]
    type_name: ClassVar[str] = "AdjacentNumbers"

    def __post_init__(self):
        object.__setattr__(self, 'numbers', tuple(sorted(self.numbers)))

    def is_valid(self, roulette_type: RouletteType) -> bool:
        numbers = frozenset(self.numbers)
        if len(numbers) != len(self.numbers):
            return False
        if len(numbers) not in ADJACENT_PAYOUTS:
            return False
        if not all(is_valid_number(n, roulette_type) for n in numbers):
            return False

        if len(numbers) == 2:
            return is_split(numbers, roulette_type)
        if len(numbers) == 3:
            return is_basket(numbers, roulette_type)
        return is_corner(numbers)

    def wins(self, slot: Slot) -> bool:
        return slot.number in self.numbers

    @property
    def payout_multiplier(self) -> int:
        return ADJACENT_PAYOUTS.get(len(self.numbers), 0)

    def get_value_string(self) -> str:
        labels = ("00" if n == DOUBLE_ZERO else str(n) for n in self.numbers)
        return "[" + " ".join(labels) + "]"

    def _json_value(self):
        return list(self.numbers)


BET_VALUE_TYPES = {
    cls.type_name: cls
    for cls in (
        AdjacentNumbersBet, ColorBet, ColumnBet, DoubleColumnBet, DozenBet,
        EvenOddBet, HalfBet, NumberBet, RowBet,
    )
}


# ============================================================================
# BETS
# ============================================================================

@dataclass
class BetLog:
    """Outcome of a bet in one round."""
    round_number: int
    bet_state: BetState
    amount_cents: int

    def to_dict(self) -> dict:
        return {
            'round_number': self.round_number,
            'bet_state': self.bet_state.value,
            'amount_cents': self.amount_cents
        }


@dataclass
class Bet:
    """
    A strategic bet owned by one agent.

    `amount_cents` is the current stake; `initial_amount_cents` is the
    baseline the stake returns to after a win.
    """
    bet_value: BetValue
    amount_cents: int
    progression_factor: int
    initial_amount_cents: Optional[int] = None
    bet_state: BetState = BetState.ACTIVE
    bet_logs: List[BetLog] = field(default_factory=list)
    # False once validation has rejected the bet
    placeable: bool = True

    def __post_init__(self):
        if self.initial_amount_cents is None:
            self.initial_amount_cents = self.amount_cents

    @property
    def consolidation_key(self) -> Tuple[BetValue, int]:
        return (self.bet_value, self.progression_factor)

    @property
    def is_exhausted(self) -> bool:
        return (
            self.bet_state != BetState.ACTIVE
            and self.amount_cents <= 0
            and self.initial_amount_cents <= 0
            and self.progression_factor <= 0
        )

    def validate(self, roulette_type: RouletteType) -> None:
        """
        Deactivate the bet if it cannot be placed on this wheel.
        Never re-activates a bet.
        """
        if self.is_exhausted or not self.bet_value.is_valid(roulette_type):
            self.bet_state = BetState.INACTIVE
            self.placeable = False

    def settle(self, slot: Slot) -> int:
        """
        Resolve an active bet against the winning slot.

        Returns:
            Cents credited back to the owner (0 when lost)
        """
        if self.bet_state != BetState.ACTIVE:
            return 0
        if self.bet_value.wins(slot):
            self.bet_state = BetState.WON
            return self.amount_cents * self.bet_value.payout_multiplier
        self.bet_state = BetState.LOST
        return 0

    def log_round(self, round_number: int) -> None:
        if self.bet_state != BetState.INACTIVE:
            self.bet_logs.append(BetLog(round_number, self.bet_state, self.amount_cents))

    def progress(self) -> None:
        """Apply the progression: grow the stake after a loss, reset after a win."""
        if self.bet_state == BetState.LOST:
            self.amount_cents *= self.progression_factor
        elif self.bet_state == BetState.WON:
            self.amount_cents = self.initial_amount_cents

    def to_dict(self) -> dict:
        return {
            'bet_value': self.bet_value.to_dict(),
            'amount_cents': self.amount_cents,
            'initial_amount_cents': self.initial_amount_cents,
            'progression_factor': self.progression_factor,
            'bet_state': self.bet_state.value,
            'bet_logs': [log.to_dict() for log in self.bet_logs]
        }
