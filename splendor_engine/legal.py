# splendor_engine/legal.py

"""
Enumerates the actions open to the current player, for bots and agent
environments. Candidates are generated per action shape and then filtered
through Game.validate_action, so the rules live in one place.
"""

import itertools
from collections import Counter
from typing import List

from .actions import (
    Action,
    DiscardTokens,
    buy_from_market,
    buy_from_reserved,
    discard,
    reserve_from_market,
    reserve_from_top,
    take,
)
from .constants import CARD_LEVELS, FACE_UP_CARDS_PER_LEVEL, MAX_RESERVED_CARDS, GemColor
from .game import Game, TurnPhase
from .player import Player


def get_legal_actions(game: Game) -> List[Action]:
    if game.phase is TurnPhase.DISCARD:
        return list(get_legal_discards(game))
    if game.phase is not TurnPhase.MAIN_ACTION:
        return []
    candidates: List[Action] = []
    candidates.extend(_take_candidates())
    candidates.extend(_buy_candidates())
    candidates.extend(_reserve_candidates())
    return [action for action in candidates if game.validate_action(action)]


def _take_candidates() -> List[Action]:
    actions: List[Action] = []
    standard_gems = GemColor.get_standard_gems()
    for combo in itertools.combinations(standard_gems, 3):
        actions.append(take({c: 1 for c in combo}))
    for color in standard_gems:
        actions.append(take({color: 2}))
    return actions


def _buy_candidates() -> List[Action]:
    actions: List[Action] = []
    for level in CARD_LEVELS:
        for index in range(FACE_UP_CARDS_PER_LEVEL):
            actions.append(buy_from_market(level, index))
    for index in range(MAX_RESERVED_CARDS):
        actions.append(buy_from_reserved(index))
    return actions


def _reserve_candidates() -> List[Action]:
    actions: List[Action] = []
    for level in CARD_LEVELS:
        for index in range(FACE_UP_CARDS_PER_LEVEL):
            actions.append(reserve_from_market(level, index))
    for level in CARD_LEVELS:
        actions.append(reserve_from_top(level))
    return actions


def get_legal_discards(game: Game) -> List[DiscardTokens]:
    """Every way of returning exactly the excess tokens."""
    return discards_for(game.current_player, game.tokens_over_limit())


def discards_for(player: Player, count: int) -> List[DiscardTokens]:
    if count <= 0:
        return []
    held = [color for color in GemColor.get_all_gems() if player.gems[color] > 0]
    actions: List[DiscardTokens] = []
    for combo in itertools.combinations_with_replacement(held, count):
        counts = Counter(combo)
        if all(player.gems[color] >= n for color, n in counts.items()):
            actions.append(discard(dict(counts)))
    return actions
