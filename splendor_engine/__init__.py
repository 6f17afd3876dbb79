# splendor_engine/__init__.py

"""
Splendor Rule Engine Package
============================

A synchronous, front-end independent rule engine for Splendor.

Modules:
- constants.py: Rule numbers, gem colors and the card catalogue.
- tokens.py: TokenPool, the never-negative token counter.
- card.py: DevelopmentCard, NobleTile, Deck and the card id sequence.
- board.py / player.py: Shared board and per-player state.
- state.py: GameState and the immutable views handed to front ends.
- actions.py: The four action variants and their constructors.
- validator.py / executor.py: Legality checks and state mutation.
- turns.py: Turn order and the end-game final round.
- game.py: The Game facade that enforces the turn phases.
- factory.py: create_game(), the standard setup.
- legal.py: Legal-action enumeration for bots and environments.
- main_text.py: Hot-seat console front end.
"""

from .constants import GemColor, MAX_GEMS_PER_PLAYER, WINNING_SCORE
from .card import DevelopmentCard, NobleTile
from .board import Board
from .player import Player
from .errors import ActionBuildError, InvariantViolation, PhaseError, SplendorError, ValidationResult
from .actions import (
    Action,
    ActionType,
    BuyCard,
    DiscardTokens,
    ReserveCard,
    TakeTokens,
    buy_from_market,
    buy_from_reserved,
    discard,
    reserve_from_market,
    reserve_from_top,
    take,
)
from .game import Game, TurnPhase
from .factory import create_game

__all__ = [
    'Game',
    'TurnPhase',
    'create_game',
    'Board',
    'Player',
    'DevelopmentCard',
    'NobleTile',
    'GemColor',
    'Action',
    'ActionType',
    'TakeTokens',
    'BuyCard',
    'ReserveCard',
    'DiscardTokens',
    'take',
    'buy_from_market',
    'buy_from_reserved',
    'reserve_from_market',
    'reserve_from_top',
    'discard',
    'ValidationResult',
    'SplendorError',
    'ActionBuildError',
    'InvariantViolation',
    'PhaseError',
    'WINNING_SCORE',
    'MAX_GEMS_PER_PLAYER',
]
