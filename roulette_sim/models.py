"""
Data models for the roulette strategy simulator.
Immutable slot descriptions, categorical enums, the game configuration
and the simulator's exception hierarchy.
"""

import json
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union


# Slot number used for the "00" pocket of American wheels
DOUBLE_ZERO = -1


# ============================================================================
# EXCEPTIONS
# ============================================================================

class RouletteSimError(Exception):
    """Base exception for simulator errors."""
    pass


class DeserializationError(RouletteSimError):
    """Raised when configuration, agent or bet input is malformed."""

    def __init__(self, message: str, value: Any = None):
        self.value = value
        if value is not None:
            message = f"{message}: {value!r}"
        super().__init__(message)


class ConfigurationError(RouletteSimError):
    """Raised when a configuration file cannot be loaded."""
    pass


class BoardGenerationError(RouletteSimError):
    """Raised when a board cannot satisfy the color balance."""
    pass


class SpinError(RouletteSimError):
    """Raised when no slot can be chosen from a board."""
    pass


# ============================================================================
# ENUMS
# ============================================================================

class RouletteType(Enum):
    """Type of roulette wheel."""
    EUROPEAN = "European"  # 37 slots: 0-36
    AMERICAN = "American"  # 38 slots: 0-36, 00


class Color(Enum):
    """Slot colors."""
    GREEN = "Green"
    RED = "Red"
    BLACK = "Black"


class EvenOdd(Enum):
    """Slot parity. Zero pockets have their own parity."""
    ZERO = "Zero"
    EVEN = "Even"
    ODD = "Odd"


class BetState(Enum):
    """State of a bet within one round."""
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    WON = "Won"
    LOST = "Lost"


class Dozen(Enum):
    ZERO = 0
    ONE = 1
    TWO = 2
    THREE = 3


class Half(Enum):
    ZERO = 0
    ONE = 1
    TWO = 2


class Row(Enum):
    ZERO = 0
    ONE = 1
    TWO = 2
    THREE = 3


class Column(Enum):
    """One of the twelve columns of three numbers on the layout."""
    ZERO = 0
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    ELEVEN = 11
    TWELVE = 12


def parse_enum(enum_cls, raw: Union[str, int]):
    """
    Resolve an enum member from its name ("One", "RED") or its value.

    Raises:
        DeserializationError: If nothing matches
    """
    if isinstance(raw, enum_cls):
        return raw
    if isinstance(raw, str):
        key = raw.strip().upper()
        if key in enum_cls.__members__:
            return enum_cls[key]
    for member in enum_cls:
        if isinstance(member.value, str) and isinstance(raw, str):
            if member.value.upper() == raw.strip().upper():
                return member
        elif member.value == raw and not isinstance(raw, bool):
            return member
    raise DeserializationError(f"Invalid {enum_cls.__name__}", raw)


# ============================================================================
# SLOT
# ============================================================================

def is_zero_number(n: int) -> bool:
    """0 and 00 share the Zero member of every category."""
    return n in (0, DOUBLE_ZERO)


@dataclass(frozen=True)
class Slot:
    """
    One pocket of the wheel with all of its categorical properties.
    Immutable once the board is generated.
    """
    number: int
    color: Color
    even_odd: EvenOdd
    dozen: Dozen
    half: Half
    row: Row
    column: Column

    @staticmethod
    def from_number(n: int, color: Optional[Color] = None) -> 'Slot':
        """
        Build a slot, deriving every category from the number.

        Args:
            n: Slot number (-1 for "00", 0-36 otherwise)
            color: Color assigned by the board generator (ignored for zeros)

        Returns:
            Slot instance

        Raises:
            ValueError: If the number is outside -1..36 or a non-zero
                number has no red/black color
        """
        if is_zero_number(n):
            return Slot(
                number=n,
                color=Color.GREEN,
                even_odd=EvenOdd.ZERO,
                dozen=Dozen.ZERO,
                half=Half.ZERO,
                row=Row.ZERO,
                column=Column.ZERO
            )

        if not 1 <= n <= 36:
            raise ValueError(f"Slot number {n} is out of range (-1-36)")
        if color not in (Color.RED, Color.BLACK):
            raise ValueError(f"Slot {n} must be Red or Black, got {color}")

        return Slot(
            number=n,
            color=color,
            even_odd=EvenOdd.EVEN if n % 2 == 0 else EvenOdd.ODD,
            dozen=Dozen(math.ceil(n / 12)),
            half=Half(math.ceil(n / 18)),
            row=Row((n - 1) % 3 + 1),
            column=Column(math.ceil(n / 3))
        )

    @property
    def label(self) -> str:
        return "00" if self.number == DOUBLE_ZERO else str(self.number)

    def to_dict(self) -> dict:
        return {
            'number': self.label,
            'color': self.color.value,
            'even_odd': self.even_odd.value,
            'dozen': self.dozen.value,
            'half': self.half.value,
            'row': self.row.value,
            'column': self.column.value
        }

    def __str__(self) -> str:
        return f"{self.label} {self.color.value}"


# ============================================================================
# CONFIGURATION
# ============================================================================

def _require(data: Dict[str, Any], key: str, kind) -> Any:
    if key not in data:
        raise DeserializationError(f"Missing '{key}' in game config", data)
    value = data[key]
    # bool is an int subclass, reject it where a count is expected
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise DeserializationError(f"'{key}' must be {kind.__name__}", value)
    return value


def _optional_int(data: Dict[str, Any], key: str) -> Optional[int]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool):
        raise DeserializationError(f"'{key}' must be int", value)
    return value


@dataclass
class GameConfig:
    """Configuration shared by every game of a simulation run."""
    number_of_rounds: int
    number_of_games: int
    allow_negative_balance: bool = False
    roulette_type: RouletteType = RouletteType.EUROPEAN
    max_workers: Optional[int] = None
    batch_size: Optional[int] = None
    seed: Optional[int] = None

    def __post_init__(self):
        if self.number_of_rounds < 0:
            raise DeserializationError("number_of_rounds must not be negative", self.number_of_rounds)
        if self.number_of_games < 0:
            raise DeserializationError("number_of_games must not be negative", self.number_of_games)
        if self.max_workers is not None and self.max_workers < 1:
            raise DeserializationError("max_workers must be positive", self.max_workers)
        if self.batch_size is not None and self.batch_size < 1:
            raise DeserializationError("batch_size must be positive", self.batch_size)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameConfig':
        """
        Build a configuration from decoded JSON.

        Raises:
            DeserializationError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise DeserializationError("Game config must be an object", data)

        roulette_type = data.get('roulette_type')
        return cls(
            number_of_rounds=_require(data, 'number_of_rounds', int),
            number_of_games=_require(data, 'number_of_games', int),
            allow_negative_balance=_require(data, 'allow_negative_balance', bool),
            roulette_type=(
                RouletteType.EUROPEAN if roulette_type is None
                else parse_enum(RouletteType, roulette_type)
            ),
            max_workers=_optional_int(data, 'max_workers'),
            batch_size=_optional_int(data, 'batch_size'),
            seed=_optional_int(data, 'seed')
        )

    @classmethod
    def from_file(cls, file_path: Path) -> 'GameConfig':
        """Load configuration from a JSON file."""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigurationError(f"Game config file not found: {file_path}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in game config file {file_path}: {e}")

        return cls.from_dict(data)

    def to_dict(self) -> dict:
        return {
            'number_of_rounds': self.number_of_rounds,
            'number_of_games': self.number_of_games,
            'allow_negative_balance': self.allow_negative_balance,
            'roulette_type': self.roulette_type.value,
            'max_workers': self.max_workers,
            'batch_size': self.batch_size,
            'seed': self.seed
        }
