# splendor_engine/state.py

"""
GameState and the read-only views handed to front ends.

Front ends (console, network sessions, bots) read the game through
GameView snapshots: tuples and read-only mappings copied out of the live
objects, so nothing outside the executor can reach the mutable board or
players.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple

from .board import Board
from .card import DevelopmentCard, NobleTile
from .constants import CARD_LEVELS, GemColor
from .player import Player


class GameState:
    def __init__(self, board: Board, players: Sequence[Player]):
        self.board = board
        self._players: Tuple[Player, ...] = tuple(players)

    @property
    def players(self) -> Tuple[Player, ...]:
        return self._players

    def snapshot(self, current_player_index: Optional[int] = None) -> "GameView":
        return GameView(
            board=BoardView.of(self.board),
            players=tuple(PlayerView.of(p) for p in self._players),
            current_player_index=current_player_index,
        )


@dataclass(frozen=True)
class PlayerView:
    name: str
    gems: Mapping[GemColor, int]
    bonuses: Mapping[GemColor, int]
    cards: Tuple[DevelopmentCard, ...]
    reserved_cards: Tuple[DevelopmentCard, ...]
    nobles: Tuple[NobleTile, ...]
    score: int

    @classmethod
    def of(cls, player: Player) -> "PlayerView":
        return cls(
            name=player.name,
            gems=MappingProxyType(player.gems.as_dict()),
            bonuses=MappingProxyType(dict(player.bonuses)),
            cards=tuple(player.cards),
            reserved_cards=tuple(player.reserved_cards),
            nobles=tuple(player.nobles),
            score=player.score,
        )

    @property
    def total_gems(self) -> int:
        return sum(self.gems.values())


@dataclass(frozen=True)
class BoardView:
    gem_stacks: Mapping[GemColor, int]
    face_up_cards: Mapping[int, Tuple[DevelopmentCard, ...]]
    deck_sizes: Mapping[int, int]
    nobles: Tuple[NobleTile, ...]

    @classmethod
    def of(cls, board: Board) -> "BoardView":
        return cls(
            gem_stacks=MappingProxyType(board.gem_stacks.as_dict()),
            face_up_cards=MappingProxyType({level: board.face_up(level) for level in CARD_LEVELS}),
            deck_sizes=MappingProxyType({level: len(board.decks[level]) for level in CARD_LEVELS}),
            nobles=tuple(board.nobles),
        )


@dataclass(frozen=True)
class GameView:
    board: BoardView
    players: Tuple[PlayerView, ...]
    current_player_index: Optional[int] = None

    @property
    def current_player(self) -> Optional[PlayerView]:
        if self.current_player_index is None:
            return None
        return self.players[self.current_player_index]
