# splendor_engine/tokens.py

from typing import Dict, Iterable, Mapping, Optional, Tuple

from .constants import GemColor
from .errors import InvariantViolation

TokenDict = Dict[GemColor, int]


class TokenPool:
    """
    Counts of each of the six token kinds, never negative.

    Used for the board supply and for every player's holdings. Removing
    more than the balance raises InvariantViolation; nothing is clamped.
    """

    def __init__(self, initial: Optional[Mapping[GemColor, int]] = None):
        self._counts: TokenDict = {color: 0 for color in GemColor.get_all_gems()}
        if initial:
            for color, count in initial.items():
                self.add(color, count)

    def get(self, color: GemColor) -> int:
        return self._counts[color]

    def __getitem__(self, color: GemColor) -> int:
        return self._counts[color]

    def add(self, color: GemColor, amount: int) -> None:
        if amount < 0:
            raise InvariantViolation(f"Cannot add a negative amount ({amount}) of {color.value}")
        self._counts[color] += amount

    def can_remove(self, color: GemColor, amount: int) -> bool:
        return 0 <= amount <= self._counts[color]

    def remove(self, color: GemColor, amount: int) -> None:
        if not self.can_remove(color, amount):
            raise InvariantViolation(
                f"Cannot remove {amount} {color.value} token(s); only {self._counts[color]} held"
            )
        self._counts[color] -= amount

    def transfer_to(self, other: "TokenPool", amounts: Mapping[GemColor, int]) -> None:
        """Moves amounts into another pool, checking the whole batch first."""
        for color, amount in amounts.items():
            if not self.can_remove(color, amount):
                raise InvariantViolation(
                    f"Cannot transfer {amount} {color.value} token(s); only {self._counts[color]} held"
                )
        for color, amount in amounts.items():
            self.remove(color, amount)
            other.add(color, amount)

    def total(self) -> int:
        return sum(self._counts.values())

    def items(self) -> Iterable[Tuple[GemColor, int]]:
        return self._counts.items()

    def as_dict(self) -> TokenDict:
        return dict(self._counts)

    def copy(self) -> "TokenPool":
        return TokenPool(self._counts)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TokenPool):
            return NotImplemented
        return self._counts == other._counts

    def __repr__(self) -> str:
        return " ".join(f"{c.value}:{v}" for c, v in self._counts.items())
