# splendor_engine/player.py

from typing import Dict, List

from .constants import MAX_GEMS_PER_PLAYER, MAX_RESERVED_CARDS, GemColor
from .card import CostDict, DevelopmentCard, NobleTile
from .errors import InvariantViolation
from .tokens import TokenPool


class Player:
    def __init__(self, name: str):
        self.name: str = name
        self.gems: TokenPool = TokenPool()
        self.bonuses: Dict[GemColor, int] = {color: 0 for color in GemColor.get_standard_gems()}
        self.cards: List[DevelopmentCard] = []
        self.reserved_cards: List[DevelopmentCard] = []
        self.nobles: List[NobleTile] = []
        self.score: int = 0

    def get_total_gems(self) -> int:
        return self.gems.total()

    def is_over_gem_limit(self) -> bool:
        return self.get_total_gems() > MAX_GEMS_PER_PLAYER

    def can_reserve(self) -> bool:
        return len(self.reserved_cards) < MAX_RESERVED_CARDS

    def get_bonus(self, color: GemColor) -> int:
        return self.bonuses.get(color, 0)

    def add_card(self, card: DevelopmentCard) -> None:
        self.cards.append(card)
        self.score += card.points
        self.bonuses[card.gem_type] += 1

    def add_reserved_card(self, card: DevelopmentCard) -> None:
        if not self.can_reserve():
            raise InvariantViolation("Player has reached the maximum number of reserved cards")
        self.reserved_cards.append(card)

    def add_noble(self, noble: NobleTile) -> None:
        self.nobles.append(noble)
        self.score += noble.points

    def calculate_effective_cost(self, card: DevelopmentCard) -> CostDict:
        return {color: max(0, cost - self.get_bonus(color)) for color, cost in card.cost.items()}

    def gold_shortfall(self, card: DevelopmentCard) -> int:
        """Gold needed on top of matching tokens to buy the card."""
        return sum(max(0, cost - self.gems[color]) for color, cost in self.calculate_effective_cost(card).items())

    def can_afford(self, card: DevelopmentCard) -> bool:
        return self.gold_shortfall(card) <= self.gems[GemColor.GOLD]

    def get_payment(self, card: DevelopmentCard) -> CostDict:
        """
        Tokens to hand over for the card, spending as little gold as possible:
        matching tokens first, then gold for whatever is still missing.
        """
        payment: CostDict = {}
        shortfall = 0
        for color, cost in self.calculate_effective_cost(card).items():
            spend = min(self.gems[color], cost)
            if spend > 0:
                payment[color] = spend
            shortfall += cost - spend
        if shortfall > 0:
            payment[GemColor.GOLD] = shortfall
        return payment

    def __repr__(self) -> str:
        rep_str = f"--- {self.name} (Score: {self.score}) ---\n"
        rep_str += "Gems: " + ", ".join(f"{c.value}: {v}" for c, v in self.gems.items() if v > 0) + "\n"
        rep_str += "Bonuses: " + ", ".join(f"{c.value}: {v}" for c, v in self.bonuses.items() if v > 0) + "\n"
        rep_str += f"Reserved: {len(self.reserved_cards)} cards\n"
        rep_str += f"Nobles: {len(self.nobles)}\n"
        rep_str += "-----------------------------"
        return rep_str
