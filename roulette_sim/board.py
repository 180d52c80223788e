"""
Wheel layout generation.

Zero pockets are fixed; the red/black split of 1-36 is drawn at random but
always balanced 18/18.
"""

import logging
import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .models import (
    DOUBLE_ZERO, BoardGenerationError, Color, RouletteType, Slot, SpinError
)


logger = logging.getLogger(__name__)


SLOTS_PER_COLOR = 18


def pick_color(remaining: Dict[Color, int], rng: random.Random) -> Color:
    """
    Choose the color of the next slot from the remaining capacities.

    Args:
        remaining: Slots still available per color
        rng: Random source of the game being built

    Returns:
        Color.RED or Color.BLACK

    Raises:
        BoardGenerationError: If both colors are exhausted
    """
    red = remaining.get(Color.RED, 0)
    black = remaining.get(Color.BLACK, 0)

    if red <= 0 and black <= 0:
        raise BoardGenerationError(f"No Red or Black slots left to assign: {remaining}")
    if black <= 0:
        return Color.RED
    if red <= 0:
        return Color.BLACK
    return rng.choice((Color.RED, Color.BLACK))


@dataclass
class Board:
    """Ordered collection of wheel slots."""
    slots: List[Slot] = field(default_factory=list)

    @classmethod
    def generate(cls, roulette_type: RouletteType, rng: Optional[random.Random] = None) -> 'Board':
        """
        Generate a randomized, color-balanced board.

        Args:
            roulette_type: European (single zero) or American (double zero)
            rng: Random source; a fresh one is created when omitted

        Raises:
            BoardGenerationError: If color balancing becomes unsatisfiable
        """
        rng = rng or random.Random()
        slots = [Slot.from_number(0)]
        if roulette_type == RouletteType.AMERICAN:
            slots.append(Slot.from_number(DOUBLE_ZERO))

        remaining = {Color.RED: SLOTS_PER_COLOR, Color.BLACK: SLOTS_PER_COLOR}
        for n in range(1, 37):
            color = pick_color(remaining, rng)
            remaining[color] -= 1
            slots.append(Slot.from_number(n, color))

        board = cls(slots)
        logger.debug(f"Generated {roulette_type.value} board with {len(board)} slots")
        return board

    def __len__(self) -> int:
        return len(self.slots)

    def spin(self, rng: random.Random) -> Slot:
        """
        Choose the winning slot uniformly at random.

        Raises:
            SpinError: If the board has no slots
        """
        if not self.slots:
            raise SpinError("Unable to choose a random slot from an empty board")
        return rng.choice(self.slots)

    def summary(self) -> dict:
        """Count slots per category, for display and sanity checks."""
        numbers = [slot.number for slot in self.slots]
        return {
            'slots': len(self.slots),
            'unique_numbers': len(set(numbers)) == len(numbers),
            'color': dict(Counter(slot.color.value for slot in self.slots)),
            'even_odd': dict(Counter(slot.even_odd.value for slot in self.slots)),
            'dozen': dict(Counter(slot.dozen.value for slot in self.slots)),
            'half': dict(Counter(slot.half.value for slot in self.slots)),
            'row': dict(Counter(slot.row.value for slot in self.slots)),
            'column': dict(Counter(slot.column.value for slot in self.slots)),
        }
