# splendor_engine/validator.py

"""
Legality checks for player actions.

validate() never mutates anything. Every rejection carries a reason the
player can act on, and a corrected action can simply be submitted again.
"""

from typing import Optional

from .actions import Action, BuyCard, DiscardTokens, ReserveCard, TakeTokens, TokenRequest
from .board import Board
from .card import DevelopmentCard
from .constants import CARD_LEVELS, MAX_GEMS_PER_PLAYER, MAX_RESERVED_CARDS
from .errors import ValidationResult
from .player import Player
from .state import GameState

MIN_SUPPLY_FOR_TAKE_TWO = 4


class ActionValidator:

    def validate(self, state: GameState, player_index: int, action: Optional[Action]) -> ValidationResult:
        if action is None:
            return ValidationResult.error("No action selected.")
        player = state.players[player_index]
        board = state.board

        if isinstance(action, TakeTokens):
            return self._validate_take_tokens(board, action)
        if isinstance(action, BuyCard):
            return self._validate_buy_card(board, player, action)
        if isinstance(action, ReserveCard):
            return self._validate_reserve(board, player, action)
        if isinstance(action, DiscardTokens):
            return self._validate_discard(player, action)
        return ValidationResult.error(f"Unknown action: {action!r}")

    def _check_duplicates(self, tokens: TokenRequest) -> Optional[ValidationResult]:
        seen = set()
        for color, amount in tokens:
            if amount == 0:
                continue
            if color in seen:
                return ValidationResult.error(f"You listed {color.value} more than once.")
            seen.add(color)
        return None

    def _validate_take_tokens(self, board: Board, action: TakeTokens) -> ValidationResult:
        requested = [(color, amount) for color, amount in action.tokens if amount != 0]
        if not requested:
            return ValidationResult.error("You must take some tokens.")
        for color, amount in requested:
            if not color.is_standard:
                return ValidationResult.error("You may not take gold tokens.")
            if amount < 0:
                return ValidationResult.error("Token amounts must be positive.")
        duplicate = self._check_duplicates(action.tokens)
        if duplicate is not None:
            return duplicate

        if len(requested) == 3:
            for color, amount in requested:
                if amount != 1:
                    return ValidationResult.error("To take three colors, you must take 1 of each.")
                if board.gem_stacks[color] < 1:
                    return ValidationResult.error(f"Not enough {color.value} tokens in the supply.")
            return ValidationResult.ok()

        if len(requested) == 1:
            color, amount = requested[0]
            if amount != 2:
                return ValidationResult.error(
                    "You must either take 3 different colors or 2 of one color."
                )
            if board.gem_stacks[color] < MIN_SUPPLY_FOR_TAKE_TWO:
                return ValidationResult.error(
                    f"You may take two {color.value} only if at least "
                    f"{MIN_SUPPLY_FOR_TAKE_TWO} are in the supply."
                )
            # The token cap is enforced by the follow-up discard, not here.
            return ValidationResult.ok()

        return ValidationResult.error("You must either take 3 different colors or 2 of one color.")

    def _validate_buy_card(self, board: Board, player: Player, action: BuyCard) -> ValidationResult:
        card: DevelopmentCard
        if action.is_reserved_buy:
            if not 0 <= action.index < len(player.reserved_cards):
                return ValidationResult.error("Reserved card index is out of range.")
            card = player.reserved_cards[action.index]
            if not player.can_afford(card):
                return ValidationResult.error("You cannot afford that reserved card.")
            return ValidationResult.ok()

        if action.level not in CARD_LEVELS:
            return ValidationResult.error("Invalid card level.")
        market = board.face_up(action.level)
        if not 0 <= action.index < len(market):
            return ValidationResult.error("No card at that position.")
        card = market[action.index]
        if not player.can_afford(card):
            return ValidationResult.error("You cannot afford that card.")
        return ValidationResult.ok()

    def _validate_reserve(self, board: Board, player: Player, action: ReserveCard) -> ValidationResult:
        if not player.can_reserve():
            return ValidationResult.error(
                f"You already have the maximum of {MAX_RESERVED_CARDS} reserved cards."
            )
        if action.level not in CARD_LEVELS:
            return ValidationResult.error("Invalid card level.")
        if action.is_deck_reserve:
            if not board.has_cards_in_deck(action.level):
                return ValidationResult.error("That deck is empty; you cannot reserve from it.")
            return ValidationResult.ok()
        if action.index is None or not 0 <= action.index < len(board.face_up(action.level)):
            return ValidationResult.error("No card at that position to reserve.")
        return ValidationResult.ok()

    def _validate_discard(self, player: Player, action: DiscardTokens) -> ValidationResult:
        if not action.tokens:
            return ValidationResult.error("You must discard at least one token.")
        for color, amount in action.tokens:
            if amount <= 0:
                return ValidationResult.error("Discard amounts must be positive.")
        duplicate = self._check_duplicates(action.tokens)
        if duplicate is not None:
            return duplicate
        total_discard = 0
        for color, amount in action.tokens:
            if player.gems[color] < amount:
                return ValidationResult.error(
                    f"You do not have enough {color.value} tokens to discard."
                )
            total_discard += amount
        if player.get_total_gems() - total_discard > MAX_GEMS_PER_PLAYER:
            return ValidationResult.error(
                f"You must discard enough tokens to reach {MAX_GEMS_PER_PLAYER} or fewer."
            )
        return ValidationResult.ok()
