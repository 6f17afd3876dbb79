# splendor_engine/turns.py

from typing import Optional, Sequence

from .constants import MIN_PLAYERS, WINNING_SCORE
from .player import Player


class TurnManager:
    """Whose turn it is. advance_to_next_player() is the only thing that moves it."""

    def __init__(self, player_count: int, first_player_index: int = 0):
        if player_count < MIN_PLAYERS:
            raise ValueError(f"At least {MIN_PLAYERS} players required, got {player_count}")
        if not 0 <= first_player_index < player_count:
            raise ValueError(f"First player index {first_player_index} out of range")
        self.player_count = player_count
        self.first_player_index = first_player_index
        self.current_player_index = first_player_index

    def advance_to_next_player(self) -> int:
        self.current_player_index = (self.current_player_index + 1) % self.player_count
        return self.current_player_index


class EndGameManager:
    """
    Tracks the end-game trigger and the final round.

    Reaching WINNING_SCORE only starts the final round; the game ends when
    play comes back around to the first player, so every seat gets the
    same number of turns.
    """

    def __init__(self, first_player_index: int = 0):
        self.first_player_index = first_player_index
        self.final_round_triggered: bool = False
        self.game_over: bool = False

    def check_end_triggered(self, players: Sequence[Player], acting_index: int) -> None:
        """Run after the acting player's action, discard and nobles, before the turn advances."""
        if self.final_round_triggered or self.game_over:
            return
        if players[acting_index].score >= WINNING_SCORE:
            self.final_round_triggered = True

    def on_turn_advanced(self, new_index: int) -> None:
        if self.final_round_triggered and new_index == self.first_player_index:
            self.game_over = True

    def determine_winner(self, players: Sequence[Player]) -> Optional[Player]:
        """
        Highest score wins; ties go to the player with fewer purchased cards.
        Any tie left after that goes to the earliest seat.
        """
        if not players:
            return None
        return max(players, key=lambda p: (p.score, -len(p.cards)))
