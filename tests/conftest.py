import itertools
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import pytest

from splendor_engine.board import Board
from splendor_engine.card import Deck, DevelopmentCard, NobleTile
from splendor_engine.constants import CARD_LEVELS, GemColor
from splendor_engine.factory import create_game
from splendor_engine.game import Game
from splendor_engine.player import Player
from splendor_engine.state import GameState
from splendor_engine.tokens import TokenPool

W, U, G, R, K = GemColor.get_standard_gems()
GOLD = GemColor.GOLD

_ids = itertools.count(1000)


def make_card(level: int = 1, points: int = 0, gem: GemColor = W,
              cost: Optional[Mapping[GemColor, int]] = None, card_id: Optional[int] = None) -> DevelopmentCard:
    return DevelopmentCard(card_id=card_id if card_id is not None else next(_ids),
                           level=level, points=points, gem_type=gem, cost=cost or {})


def make_noble(name: str, cost: Mapping[GemColor, int]) -> NobleTile:
    return NobleTile(name=name, cost=cost)


def make_game(names: Sequence[str] = ("Alice", "Bob"),
              supply: Optional[Mapping[GemColor, int]] = None,
              markets: Optional[Dict[int, List[DevelopmentCard]]] = None,
              decks: Optional[Dict[int, List[DevelopmentCard]]] = None,
              nobles: Iterable[NobleTile] = ()) -> Game:
    """
    A game with a hand-built board. Markets are placed as given (no refill
    from the deck happens until a card leaves the market).
    """
    if supply is None:
        supply = {color: 4 for color in GemColor.get_standard_gems()}
        supply[GOLD] = 5
    decks = decks or {}
    board = Board({level: Deck(level, decks.get(level, [])) for level in CARD_LEVELS},
                  list(nobles), supply=TokenPool(supply))
    for level, cards in (markets or {}).items():
        board.face_up_cards[level] = list(cards)
    players = [Player(name) for name in names]
    return Game(GameState(board, players))


def give(player: Player, tokens: Mapping[GemColor, int]) -> None:
    for color, amount in tokens.items():
        player.gems.add(color, amount)


def total_tokens(game: Game) -> Dict[GemColor, int]:
    totals = game.state.board.gem_stacks.as_dict()
    for player in game.state.players:
        for color, amount in player.gems.items():
            totals[color] += amount
    return totals


def finish_turn(game: Game) -> None:
    """Resolves nobles the simple way and ends the turn."""
    if game.auto_claim_noble() is None:
        choices = game.pending_noble_choices()
        if choices:
            game.claim_noble(choices[0])
    game.end_turn()


@pytest.fixture
def seeded_game() -> Game:
    return create_game(["Alice", "Bob"], seed=7)


@pytest.fixture
def simple_game() -> Game:
    return make_game()
