"""
Agent roster loading.

Turns decoded JSON into agents with their strategic bets. Malformed input is
never coerced: every problem raises DeserializationError.
"""

import json
import logging
from pathlib import Path
from typing import Any, List

from .agents import Agent
from .bets import (
    AdjacentNumbersBet, Bet, BetValue, ColorBet, ColumnBet, DoubleColumnBet,
    DozenBet, EvenOddBet, HalfBet, NumberBet, RowBet
)
from .models import (
    DOUBLE_ZERO, Color, Column, ConfigurationError, DeserializationError,
    Dozen, EvenOdd, Half, Row, parse_enum
)


logger = logging.getLogger(__name__)


def parse_slot_number(raw: Any) -> int:
    """Accept 17, "17" or "00" (mapped to -1)."""
    if isinstance(raw, bool):
        raise DeserializationError("Invalid slot number", raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if text == "00":
            return DOUBLE_ZERO
        try:
            return int(text)
        except ValueError:
            pass
    raise DeserializationError("Invalid slot number", raw)


def _as_list(raw: Any, what: str) -> list:
    if not isinstance(raw, list):
        raise DeserializationError(f"{what} must be a list", raw)
    return raw


def parse_bet_value(raw: Any) -> BetValue:
    """
    Parse a single-key object such as {"Color": "Red"}.

    Raises:
        DeserializationError: If the bet type or its value is not recognized
    """
    if not isinstance(raw, dict) or len(raw) != 1:
        raise DeserializationError("Bet value must be an object with exactly one key", raw)

    (bet_type, info), = raw.items()

    if bet_type == "Number":
        return NumberBet(parse_slot_number(info))
    if bet_type == "Color":
        return ColorBet(parse_enum(Color, info))
    if bet_type == "Column":
        return ColumnBet(parse_enum(Column, info))
    if bet_type == "DoubleColumn":
        columns = _as_list(info, "DoubleColumn")
        if len(columns) != 2:
            raise DeserializationError(
                f"Double column does not have 2 columns, has {len(columns)}", info
            )
        return DoubleColumnBet(tuple(parse_enum(Column, c) for c in columns))
    if bet_type == "Dozen":
        return DozenBet(parse_enum(Dozen, info))
    if bet_type == "EvenOdd":
        return EvenOddBet(parse_enum(EvenOdd, info))
    if bet_type == "Half":
        return HalfBet(parse_enum(Half, info))
    if bet_type == "Row":
        return RowBet(parse_enum(Row, info))
    if bet_type == "AdjacentNumbers":
        numbers = _as_list(info, "AdjacentNumbers")
        return AdjacentNumbersBet(tuple(parse_slot_number(n) for n in numbers))

    raise DeserializationError("Unknown bet type", bet_type)


def _require_int(entry: dict, key: str) -> int:
    value = entry.get(key)
    if not isinstance(value, int) or isinstance(value, bool):
        raise DeserializationError(f"Failed to deserialize '{key}'", entry)
    return value


def parse_bet(entry: Any) -> Bet:
    """A new bet always starts Active with its initial stake equal to its amount."""
    if not isinstance(entry, dict):
        raise DeserializationError("Strategic bet must be an object", entry)
    if 'bet_value' not in entry:
        raise DeserializationError("Failed to deserialize 'bet_value'", entry)

    return Bet(
        bet_value=parse_bet_value(entry['bet_value']),
        amount_cents=_require_int(entry, 'amount_cents'),
        progression_factor=_require_int(entry, 'progression_factor')
    )


def parse_agents(entries: Any) -> List[Agent]:
    """
    Build the agent roster.

    Args:
        entries: Decoded JSON list of agent objects

    Returns:
        Agents in input order; unnamed agents are called "Agent <n>"
    """
    entries = _as_list(entries, "Agents")
    agents = []

    for agent_number, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            raise DeserializationError("Agent must be an object", entry)

        name = entry.get('name')
        if name is None:
            name = f"Agent {agent_number}"
        elif not isinstance(name, str):
            raise DeserializationError("Agent name must be a string", name)

        bets = [parse_bet(bet) for bet in _as_list(entry.get('strategic_bets'), "strategic_bets")]
        agents.append(Agent(
            name=name,
            balance_cents=_require_int(entry, 'balance_cents'),
            strategic_bets=bets
        ))

    logger.debug(f"Loaded {len(agents)} agents")
    return agents


def read_agents_file(file_path: Path) -> List[Agent]:
    """Load the agent roster from a JSON file."""
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Agents file not found: {file_path}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in agents file {file_path}: {e}")

    return parse_agents(data)
