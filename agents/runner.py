# agents/runner.py

"""
Drives a Game with one bot per seat, through the same phases a human front
end goes through: main action, forced discards, noble resolution, end_turn.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from splendor_engine.game import Game, TurnPhase
from splendor_engine.legal import get_legal_actions

logger = logging.getLogger(__name__)

MAX_GAME_TURNS = 500


@dataclass
class GameResult:
    winner_index: Optional[int]
    winner_name: Optional[str]
    turns: int
    scores: List[int]
    stalled: bool = False
    truncated: bool = False


def play_bot_turn(game: Game, bot) -> bool:
    """
    Plays one full turn for the current seat. Returns False when the seat
    has no legal main action, in which case the game is left untouched.
    """
    legal_actions = get_legal_actions(game)
    action = bot.choose_action(game.snapshot(), legal_actions)
    if action is None:
        return False
    game.apply_action(action)

    while game.phase is TurnPhase.DISCARD:
        discard_action = bot.choose_action(game.snapshot(), get_legal_actions(game))
        game.apply_discard(discard_action)

    if game.auto_claim_noble() is None:
        choices = game.pending_noble_choices()
        if choices:
            noble = bot.choose_noble(game.snapshot(), choices)
            if noble is not None:
                game.claim_noble(noble)

    game.end_turn()
    return True


def play_bot_game(game: Game, bots: Sequence, max_turns: int = MAX_GAME_TURNS) -> GameResult:
    """Runs the game to completion, a stall, or max_turns turns."""
    if len(bots) != len(game.state.players):
        raise ValueError(f"Need one bot per seat: {len(game.state.players)} seats, {len(bots)} bots")

    stalled = False
    while not game.is_game_over():
        if game.turn_count >= max_turns:
            logger.warning("Game exceeded %d turns; stopping", max_turns)
            break
        if not play_bot_turn(game, bots[game.current_player_index]):
            logger.warning("%s has no legal action; game stalled", game.current_player.name)
            stalled = True
            break

    winner = game.determine_winner() if game.is_game_over() else None
    winner_index = game.state.players.index(winner) if winner is not None else None
    return GameResult(
        winner_index=winner_index,
        winner_name=winner.name if winner is not None else None,
        turns=game.turn_count,
        scores=[p.score for p in game.state.players],
        stalled=stalled,
        truncated=not stalled and not game.is_game_over(),
    )
