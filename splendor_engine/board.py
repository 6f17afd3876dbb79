# splendor_engine/board.py

from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .constants import CARD_LEVELS, FACE_UP_CARDS_PER_LEVEL
from .card import Deck, DevelopmentCard, NobleTile
from .errors import InvariantViolation
from .tokens import TokenPool


class Board:
    """
    Shared supply, the three decks, their face-up markets and the nobles
    still available.

    A market holds at most FACE_UP_CARDS_PER_LEVEL cards. Whenever a card
    leaves a market the caller refills that tier; the refill draws until the
    market is full or the deck runs out.
    """

    def __init__(self, decks: Mapping[int, Deck], nobles: Sequence[NobleTile],
                 supply: Optional[TokenPool] = None):
        if set(decks) != set(CARD_LEVELS):
            raise ValueError(f"Board needs one deck per level {CARD_LEVELS}, got {sorted(decks)}")
        self.gem_stacks: TokenPool = supply if supply is not None else TokenPool()
        self.decks: Dict[int, Deck] = dict(decks)
        self.face_up_cards: Dict[int, List[DevelopmentCard]] = {level: [] for level in CARD_LEVELS}
        self.nobles: List[NobleTile] = list(nobles)

    def _check_level(self, level: int) -> None:
        if level not in CARD_LEVELS:
            raise InvariantViolation(f"Invalid level: {level}")

    def initial_deal(self) -> None:
        for level in CARD_LEVELS:
            self.refill_level(level)

    def face_up(self, level: int) -> Tuple[DevelopmentCard, ...]:
        self._check_level(level)
        return tuple(self.face_up_cards[level])

    def refill_level(self, level: int) -> None:
        self._check_level(level)
        market = self.face_up_cards[level]
        deck = self.decks[level]
        while len(market) < FACE_UP_CARDS_PER_LEVEL and not deck.is_empty():
            market.append(deck.draw())

    def take_face_up_card(self, level: int, index: int) -> DevelopmentCard:
        """Removes a market card and refills its tier."""
        self._check_level(level)
        market = self.face_up_cards[level]
        if not 0 <= index < len(market):
            raise InvariantViolation(f"No card at index {index} for level {level}")
        card = market.pop(index)
        self.refill_level(level)
        return card

    def draw_card_from_deck(self, level: int) -> Optional[DevelopmentCard]:
        self._check_level(level)
        return self.decks[level].draw()

    def has_cards_in_deck(self, level: int) -> bool:
        return level in self.decks and not self.decks[level].is_empty()

    def remove_noble(self, noble: NobleTile) -> None:
        if noble not in self.nobles:
            raise InvariantViolation(f"{noble} is not on the board")
        self.nobles.remove(noble)

    def __repr__(self) -> str:
        rep_str = "--- Splendor Board State ---\n"
        rep_str += f"Gems: {self.gem_stacks}\n"
        rep_str += "Nobles: " + ", ".join(n.name for n in self.nobles) + "\n"
        for level in sorted(self.face_up_cards, reverse=True):
            rep_str += f"Level {level} Deck: ({len(self.decks[level])} cards left)\n"
            for i, card in enumerate(self.face_up_cards[level]):
                rep_str += f"  [{i}]: {card}\n"
        rep_str += "-----------------------------"
        return rep_str
