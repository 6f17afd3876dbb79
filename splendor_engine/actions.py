# splendor_engine/actions.py

"""
The four player intents as immutable values, plus the constructors front
ends use to build them from primitive indices and color maps.

The constructors only check that the primitives are well formed (known
color names, integer amounts and indices). Whether an action is legal is
the validator's job, so a request for gold or for four colors still builds
and is then rejected with a reason.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from .constants import GemColor
from .errors import ActionBuildError

TokenRequest = Tuple[Tuple[GemColor, int], ...]


class ActionType(Enum):
    TAKE_TOKENS = "take_tokens"
    BUY_CARD = "buy_card"
    RESERVE_CARD = "reserve_card"
    DISCARD_TOKENS = "discard_tokens"


def _format_tokens(tokens: TokenRequest) -> str:
    return ", ".join(f"{c.value}: {v}" for c, v in tokens)


@dataclass(frozen=True)
class TakeTokens:
    # Kept as ordered pairs so a repeated color reaches the validator.
    tokens: TokenRequest

    action_type = ActionType.TAKE_TOKENS

    @property
    def gems(self) -> Dict[GemColor, int]:
        return {color: amount for color, amount in self.tokens if amount != 0}

    def __repr__(self) -> str:
        return f"Action(TAKE: {_format_tokens(self.tokens)})"


@dataclass(frozen=True)
class BuyCard:
    index: int
    level: Optional[int] = None
    is_reserved_buy: bool = False

    action_type = ActionType.BUY_CARD

    def __repr__(self) -> str:
        if self.is_reserved_buy:
            return f"Action(BUY_RESERVED: Card at index {self.index})"
        return f"Action(BUY: L{self.level}, Idx{self.index})"


@dataclass(frozen=True)
class ReserveCard:
    level: int
    index: Optional[int] = None
    is_deck_reserve: bool = False

    action_type = ActionType.RESERVE_CARD

    def __repr__(self) -> str:
        if self.is_deck_reserve:
            return f"Action(RESERVE_DECK: L{self.level})"
        return f"Action(RESERVE: L{self.level}, Idx{self.index})"


@dataclass(frozen=True)
class DiscardTokens:
    tokens: TokenRequest

    action_type = ActionType.DISCARD_TOKENS

    @property
    def gems(self) -> Dict[GemColor, int]:
        return dict(self.tokens)

    def __repr__(self) -> str:
        return f"Action(DISCARD: {_format_tokens(self.tokens)})"


Action = Union[TakeTokens, BuyCard, ReserveCard, DiscardTokens]
MAIN_ACTION_TYPES = (TakeTokens, BuyCard, ReserveCard)


# --- Constructors used by front ends ---

ColorKey = Union[GemColor, str]
TokenSpec = Union[Mapping[ColorKey, int], Iterable[Tuple[ColorKey, int]]]


def _to_color(key: ColorKey) -> GemColor:
    if isinstance(key, GemColor):
        return key
    if isinstance(key, str):
        try:
            return GemColor.parse(key)
        except ValueError as e:
            raise ActionBuildError(str(e)) from e
    raise ActionBuildError(f"Not a gem color: {key!r}")


def _to_int(value, what: str) -> int:
    # bool is an int subclass; True is not a meaningful amount or index.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ActionBuildError(f"{what} must be an integer, got {value!r}")
    return value


def _to_request(tokens: TokenSpec) -> TokenRequest:
    pairs = tokens.items() if isinstance(tokens, Mapping) else tokens
    return tuple((_to_color(color), _to_int(amount, "Token amount")) for color, amount in pairs)


def take(tokens: TokenSpec) -> TakeTokens:
    return TakeTokens(tokens=_to_request(tokens))


def buy_from_market(tier: int, index: int) -> BuyCard:
    return BuyCard(level=_to_int(tier, "Tier"), index=_to_int(index, "Card index"))


def buy_from_reserved(index: int) -> BuyCard:
    return BuyCard(index=_to_int(index, "Reserved index"), is_reserved_buy=True)


def reserve_from_market(tier: int, index: int) -> ReserveCard:
    return ReserveCard(level=_to_int(tier, "Tier"), index=_to_int(index, "Card index"))


def reserve_from_top(tier: int) -> ReserveCard:
    return ReserveCard(level=_to_int(tier, "Tier"), is_deck_reserve=True)


def discard(tokens: TokenSpec) -> DiscardTokens:
    return DiscardTokens(tokens=_to_request(tokens))
