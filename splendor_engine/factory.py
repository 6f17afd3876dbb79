# splendor_engine/factory.py

"""
Builds a ready-to-play Game: shuffled decks, dealt markets, a random noble
row and the token supply for the player count.
"""

import random
from typing import Optional, Sequence

from .board import Board
from .card import CardIdSequence, Deck, load_development_cards, load_noble_tiles
from .constants import CARD_LEVELS, GOLD_TOKENS, MAX_PLAYERS, MIN_PLAYERS, TOKENS_PER_COLOR, GemColor
from .game import Game
from .player import Player
from .state import GameState
from .tokens import TokenPool


def starting_supply(num_players: int) -> TokenPool:
    if num_players not in TOKENS_PER_COLOR:
        raise ValueError(f"Invalid number of players: {num_players}")
    supply = TokenPool({color: TOKENS_PER_COLOR[num_players] for color in GemColor.get_standard_gems()})
    supply.add(GemColor.GOLD, GOLD_TOKENS)
    return supply


def create_game(player_names: Sequence[str], seed: Optional[int] = None,
                rng: Optional[random.Random] = None,
                id_sequence: Optional[CardIdSequence] = None) -> Game:
    """
    Creates a new game for 2-4 players.

    Args:
        player_names: Distinct, non-blank display names in seating order.
        seed: Seed for a private random generator (ignored when rng is given).
        rng: Random generator used for every shuffle.
        id_sequence: Source of card ids; a fresh one starting at 1 by default.

    Returns:
        A Game whose first player is seat 0.
    """
    names = [name.strip() for name in player_names]
    if not MIN_PLAYERS <= len(names) <= MAX_PLAYERS:
        raise ValueError(f"Splendor supports {MIN_PLAYERS}-{MAX_PLAYERS} players, got {len(names)}")
    if any(not name for name in names):
        raise ValueError("Player names must not be blank")
    if len(set(names)) != len(names):
        raise ValueError(f"Player names must be distinct: {names}")

    rng = rng or random.Random(seed)
    id_sequence = id_sequence or CardIdSequence()

    cards = load_development_cards(id_sequence)
    decks = {}
    for level in CARD_LEVELS:
        deck = Deck(level, cards[level])
        deck.shuffle(rng)
        decks[level] = deck

    nobles = load_noble_tiles()
    rng.shuffle(nobles)
    nobles = nobles[:len(names) + 1]

    board = Board(decks, nobles, supply=starting_supply(len(names)))
    board.initial_deal()

    players = [Player(name) for name in names]
    return Game(GameState(board, players))
