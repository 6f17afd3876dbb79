# splendor_engine/game.py

"""
Defines the Game facade, the one object front ends drive.

A turn always runs through the same phases:

    main action -> discard (only when over the token cap) -> nobles -> end_turn()

validate_action() reports an action submitted in the wrong phase like any
other illegal action. The mutating calls raise PhaseError instead, because
calling them out of order is a bug in the caller.
"""

import logging
from enum import Enum
from typing import List, Optional

from .actions import MAIN_ACTION_TYPES, Action, BuyCard, DiscardTokens
from .card import NobleTile
from .constants import MAX_GEMS_PER_PLAYER
from .errors import PhaseError, ValidationResult
from .executor import ActionExecutor
from .player import Player
from .state import GameState, GameView
from .turns import EndGameManager, TurnManager
from .validator import ActionValidator

logger = logging.getLogger(__name__)


class TurnPhase(Enum):
    MAIN_ACTION = "main_action"
    DISCARD = "discard"
    NOBLES = "nobles"
    GAME_OVER = "game_over"


class Game:
    """
    The main game engine. Owns the state, the turn order and the end-game
    bookkeeping, and routes every change through the validator and executor.
    """

    def __init__(self, state: GameState, first_player_index: int = 0):
        self.state = state
        self.turn_manager = TurnManager(len(state.players), first_player_index)
        self.validator = ActionValidator()
        self.executor = ActionExecutor()
        self.end_game_manager = EndGameManager(self.turn_manager.first_player_index)

        self.phase: TurnPhase = TurnPhase.MAIN_ACTION
        self.turn_count: int = 0
        self._last_action: Optional[Action] = None
        self._noble_claimed_this_turn: bool = False

    # --- Queries ---

    @property
    def current_player_index(self) -> int:
        return self.turn_manager.current_player_index

    @property
    def current_player(self) -> Player:
        return self.state.players[self.current_player_index]

    @property
    def last_action(self) -> Optional[Action]:
        return self._last_action

    def is_game_over(self) -> bool:
        return self.end_game_manager.game_over

    def is_token_limit_exceeded_for_current_player(self) -> bool:
        return self.current_player.is_over_gem_limit()

    def tokens_over_limit(self) -> int:
        return max(0, self.current_player.get_total_gems() - MAX_GEMS_PER_PLAYER)

    def snapshot(self) -> GameView:
        return self.state.snapshot(self.current_player_index)

    # --- Validation ---

    def validate_action(self, action: Optional[Action]) -> ValidationResult:
        if self.is_game_over():
            return ValidationResult.error("The game is over.")
        if action is not None:
            if self.phase is TurnPhase.DISCARD and not isinstance(action, DiscardTokens):
                return ValidationResult.error(
                    f"You must first discard down to {MAX_GEMS_PER_PLAYER} tokens."
                )
            if self.phase is TurnPhase.MAIN_ACTION and isinstance(action, DiscardTokens):
                return ValidationResult.error("No discard is required right now.")
            if self.phase is TurnPhase.NOBLES:
                return ValidationResult.error("You have already acted this turn.")
        return self.validator.validate(self.state, self.current_player_index, action)

    # --- Turn phases ---

    def _require_phase(self, phase: TurnPhase, what: str) -> None:
        if self.phase is not phase:
            raise PhaseError(f"Cannot {what} during the {self.phase.value} phase")

    def apply_action(self, action: Action) -> None:
        self._require_phase(TurnPhase.MAIN_ACTION, "apply a main action")
        if not isinstance(action, MAIN_ACTION_TYPES):
            raise PhaseError(f"{action!r} is not a main action")
        self.executor.execute(self.state, self.current_player_index, action)
        self._last_action = action
        logger.debug("%s played %r", self.current_player.name, action)
        self._after_token_change()

    def apply_discard(self, discard_action: DiscardTokens) -> None:
        self._require_phase(TurnPhase.DISCARD, "discard")
        self.executor.execute(self.state, self.current_player_index, discard_action)
        logger.debug("%s discarded %r", self.current_player.name, discard_action)
        self._after_token_change()

    def _after_token_change(self) -> None:
        if self.is_token_limit_exceeded_for_current_player():
            self.phase = TurnPhase.DISCARD
        else:
            self.phase = TurnPhase.NOBLES

    def get_claimable_nobles_for_current_player(self) -> List[NobleTile]:
        return self.executor.find_claimable_nobles(self.state.board, self.current_player)

    def pending_noble_choices(self) -> List[NobleTile]:
        """
        Nobles the current player should be offered now: only after buying a
        card, and at most one noble per turn.
        """
        if self.phase is not TurnPhase.NOBLES or self._noble_claimed_this_turn:
            return []
        if not isinstance(self._last_action, BuyCard):
            return []
        return self.get_claimable_nobles_for_current_player()

    def claim_noble(self, noble: NobleTile) -> None:
        self._require_phase(TurnPhase.NOBLES, "claim a noble")
        if self._noble_claimed_this_turn:
            raise PhaseError("Only one noble may be claimed per turn")
        self.executor.claim_noble(self.state.board, self.current_player, noble)
        self._noble_claimed_this_turn = True
        logger.debug("%s claimed %s", self.current_player.name, noble.name)

    def auto_claim_noble(self) -> Optional[NobleTile]:
        """Claims the pending noble when exactly one qualifies; several need a choice."""
        choices = self.pending_noble_choices()
        if len(choices) != 1:
            return None
        self.claim_noble(choices[0])
        return choices[0]

    def end_turn(self) -> int:
        """
        Finishes the current player's turn once the main action, any discard
        and any noble decision are done. Returns the new current index.
        """
        self._require_phase(TurnPhase.NOBLES, "end the turn")
        self.end_game_manager.check_end_triggered(self.state.players, self.current_player_index)
        new_index = self.turn_manager.advance_to_next_player()
        self.end_game_manager.on_turn_advanced(new_index)

        self.turn_count += 1
        self._last_action = None
        self._noble_claimed_this_turn = False
        self.phase = TurnPhase.GAME_OVER if self.is_game_over() else TurnPhase.MAIN_ACTION
        logger.debug("Turn %d ended; next player %d (game over: %s)",
                     self.turn_count, new_index, self.is_game_over())
        return new_index

    def determine_winner(self) -> Optional[Player]:
        return self.end_game_manager.determine_winner(self.state.players)
