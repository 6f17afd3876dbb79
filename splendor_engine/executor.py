# splendor_engine/executor.py

"""
Applies already-validated actions to the game state.

The executor trusts its input. Handing it an action the validator would
reject is a caller bug, and it surfaces as InvariantViolation from the
token pools or the board rather than as a player-facing error.
"""

from typing import List

from .actions import Action, BuyCard, DiscardTokens, ReserveCard, TakeTokens
from .board import Board
from .card import DevelopmentCard, NobleTile
from .constants import GemColor
from .errors import InvariantViolation
from .player import Player
from .state import GameState


class ActionExecutor:

    def execute(self, state: GameState, player_index: int, action: Action) -> None:
        player = state.players[player_index]
        board = state.board

        if isinstance(action, TakeTokens):
            self._execute_take_tokens(board, player, action)
        elif isinstance(action, BuyCard):
            self._execute_buy_card(board, player, action)
        elif isinstance(action, ReserveCard):
            self._execute_reserve_card(board, player, action)
        elif isinstance(action, DiscardTokens):
            self._execute_discard(board, player, action)
        else:
            raise InvariantViolation(f"Cannot execute {action!r}")

    def _execute_take_tokens(self, board: Board, player: Player, action: TakeTokens) -> None:
        board.gem_stacks.transfer_to(player.gems, action.gems)

    def _execute_buy_card(self, board: Board, player: Player, action: BuyCard) -> None:
        card: DevelopmentCard
        if action.is_reserved_buy:
            if not 0 <= action.index < len(player.reserved_cards):
                raise InvariantViolation(f"No reserved card at index {action.index}")
            card = player.reserved_cards[action.index]
        else:
            market = board.face_up(action.level)
            if not 0 <= action.index < len(market):
                raise InvariantViolation(f"No card at index {action.index} for level {action.level}")
            card = market[action.index]

        if not player.can_afford(card):
            raise InvariantViolation(f"{player.name} cannot afford {card}")
        payment = player.get_payment(card)

        # Only move the card once the payment is known to be possible.
        if action.is_reserved_buy:
            player.reserved_cards.pop(action.index)
        else:
            board.take_face_up_card(action.level, action.index)

        player.gems.transfer_to(board.gem_stacks, payment)
        player.add_card(card)

    def _execute_reserve_card(self, board: Board, player: Player, action: ReserveCard) -> None:
        if not player.can_reserve():
            raise InvariantViolation(f"{player.name} cannot reserve another card")
        if action.is_deck_reserve:
            # The deck may have emptied since validation; the gold is still taken.
            card = board.draw_card_from_deck(action.level)
        else:
            card = board.take_face_up_card(action.level, action.index)
        if card is not None:
            player.add_reserved_card(card)

        if board.gem_stacks[GemColor.GOLD] > 0:
            board.gem_stacks.transfer_to(player.gems, {GemColor.GOLD: 1})

    def _execute_discard(self, board: Board, player: Player, action: DiscardTokens) -> None:
        player.gems.transfer_to(board.gem_stacks, action.gems)

    # --- Nobles ---

    def find_claimable_nobles(self, board: Board, player: Player) -> List[NobleTile]:
        """Nobles, in board order, whose every requirement the player's bonuses meet."""
        return [noble for noble in board.nobles if self._meets_requirements(player, noble)]

    def claim_noble(self, board: Board, player: Player, noble: NobleTile) -> None:
        if not self._meets_requirements(player, noble):
            raise InvariantViolation(f"{player.name} does not qualify for {noble.name}")
        board.remove_noble(noble)
        player.add_noble(noble)

    @staticmethod
    def _meets_requirements(player: Player, noble: NobleTile) -> bool:
        return all(player.get_bonus(color) >= count for color, count in noble.cost.items())
