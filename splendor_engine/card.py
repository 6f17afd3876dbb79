# splendor_engine/card.py

"""
Development cards, noble tiles and the per-tier decks.

Cards and nobles are frozen dataclasses; a card's identity is its id, which
the setup code hands out from a CardIdSequence so two games built in the
same process never share a counter.
"""

import itertools
import random
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence

from .constants import (
    CARD_LEVELS,
    NOBLE_POINTS,
    GemColor,
    _LEVEL_1_CARDS_DATA,
    _LEVEL_2_CARDS_DATA,
    _LEVEL_3_CARDS_DATA,
    _NOBLES_DATA,
)

CostDict = Dict[GemColor, int]


def _freeze_cost(cost: Mapping[GemColor, int]) -> Mapping[GemColor, int]:
    cleaned = {}
    for color in GemColor.get_standard_gems():
        amount = cost.get(color, 0)
        if amount < 0:
            raise ValueError(f"Negative cost for {color.value}: {amount}")
        if amount > 0:
            cleaned[color] = amount
    if cost.get(GemColor.GOLD, 0):
        raise ValueError("Gold can never be part of a cost")
    return MappingProxyType(cleaned)


@dataclass(frozen=True)
class DevelopmentCard:
    card_id: int
    level: int
    points: int
    gem_type: GemColor
    cost: Mapping[GemColor, int] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if self.level not in CARD_LEVELS:
            raise ValueError(f"Invalid card level: {self.level}")
        if self.points < 0:
            raise ValueError(f"Card points must be >= 0, got {self.points}")
        if not self.gem_type.is_standard:
            raise ValueError("Card bonus must be a standard gem color")
        object.__setattr__(self, "cost", _freeze_cost(self.cost))

    def __repr__(self) -> str:
        cost_str = ", ".join(f"{c.value}: {v}" for c, v in self.cost.items())
        return f"DevCard(#{self.card_id} L{self.level}, {self.gem_type.value}, {self.points}pts, Cost:[{cost_str}])"


@dataclass(frozen=True)
class NobleTile:
    name: str
    cost: Mapping[GemColor, int] = field(default_factory=dict, compare=False)  # in card bonuses
    points: int = NOBLE_POINTS

    def __post_init__(self):
        object.__setattr__(self, "cost", _freeze_cost(self.cost))

    def __repr__(self) -> str:
        cost_str = ", ".join(f"{c.value}: {v}" for c, v in self.cost.items())
        return f"Noble({self.name}, {self.points}pts, Requires:[{cost_str}])"


class CardIdSequence:
    """Hands out card ids, starting at 1, for a single game setup."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def next_id(self) -> int:
        return next(self._counter)


class Deck:
    """Draw pile for one tier. The top of the deck is the end of the list."""

    def __init__(self, level: int, cards: Sequence[DevelopmentCard] = ()):
        self.level = level
        self._cards: List[DevelopmentCard] = list(cards)

    def shuffle(self, rng: Optional[random.Random] = None) -> None:
        (rng or random).shuffle(self._cards)

    def draw(self) -> Optional[DevelopmentCard]:
        return self._cards.pop() if self._cards else None

    def is_empty(self) -> bool:
        return not self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        return f"Deck(L{self.level}, {len(self._cards)} cards)"


def _cost_from_row(white: int, blue: int, green: int, red: int, black: int) -> CostDict:
    return dict(zip(GemColor.get_standard_gems(), (white, blue, green, red, black)))


def load_development_cards(id_sequence: CardIdSequence) -> Dict[int, List[DevelopmentCard]]:
    """Builds the full, unshuffled catalogue, one list per level."""
    catalogue = {1: _LEVEL_1_CARDS_DATA, 2: _LEVEL_2_CARDS_DATA, 3: _LEVEL_3_CARDS_DATA}
    cards = {}
    for level, rows in catalogue.items():
        cards[level] = [
            DevelopmentCard(
                card_id=id_sequence.next_id(),
                level=level,
                points=points,
                gem_type=bonus,
                cost=_cost_from_row(*amounts),
            )
            for points, bonus, *amounts in rows
        ]
    return cards


def load_noble_tiles() -> List[NobleTile]:
    return [NobleTile(name=name, cost=_cost_from_row(*amounts)) for name, *amounts in _NOBLES_DATA]
