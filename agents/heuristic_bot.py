import random
from typing import Dict, List, Optional, Sequence

from splendor_engine.actions import Action, BuyCard, DiscardTokens, ReserveCard, TakeTokens
from splendor_engine.card import DevelopmentCard, NobleTile
from splendor_engine.constants import CARD_LEVELS, MAX_GEMS_PER_PLAYER, GemColor
from splendor_engine.state import GameView, PlayerView

STYLES = ("aggressive", "defensive", "balanced")


class HeuristicBot:
    def __init__(self, player_id: int, style: str = "balanced", rng: Optional[random.Random] = None):
        if style not in STYLES:
            raise ValueError(f"Unknown style '{style}', expected one of {STYLES}")
        self.player_id = player_id
        self.style = style
        self.name = f"HeuristicBot-{style} (Player {player_id})"
        self.rng = rng or random.Random()
        self.set_weights(style)

    def set_weights(self, style: str):
        if style == "aggressive":
            self.w_points = 20.0
            self.w_development = 5.0
            self.w_defense = 0.5
            self.w_reserve = 1.0
        elif style == "defensive":
            self.w_points = 15.0
            self.w_development = 4.0
            self.w_defense = 10.0
            self.w_reserve = 5.0
        else:
            self.w_points = 18.0
            self.w_development = 4.5
            self.w_defense = 3.0
            self.w_reserve = 2.0

    def choose_action(self, view: GameView, legal_actions: List[Action]) -> Optional[Action]:
        if not legal_actions:
            return None
        candidates = list(legal_actions)
        # Shuffled so equal scores do not always favour the same slot.
        self.rng.shuffle(candidates)
        best_score = -float('inf')
        best_action = None
        for action in candidates:
            score = self.evaluate_action(action, view)
            if score > best_score:
                best_score = score
                best_action = action
        return best_action

    def choose_noble(self, view: GameView, nobles: Sequence[NobleTile]) -> Optional[NobleTile]:
        # All nobles score the same; take the one with the steepest requirement,
        # which is the hardest for anyone else to reach later.
        if not nobles:
            return None
        return max(nobles, key=lambda noble: sum(noble.cost.values()))

    def evaluate_action(self, action: Action, view: GameView) -> float:
        player = view.current_player
        score = 0.0
        if isinstance(action, BuyCard):
            card = self._get_card_from_action(action, view)
            if card:
                score += card.points * self.w_points
                score += self.w_development
                for noble in view.board.nobles:
                    if player.bonuses.get(card.gem_type, 0) < noble.cost.get(card.gem_type, 0):
                        score += 5.0
                score += 100.0
        elif isinstance(action, ReserveCard):
            card = self._get_card_from_action(action, view)
            if card:
                my_utility = (card.points * self.w_points) + self.w_development
                defense_score = card.points * self.w_defense if card.points >= 2 else 0.0
                score += my_utility * 0.3 + defense_score
            score += self.w_reserve
            if view.board.gem_stacks[GemColor.GOLD] > 0:
                score += 5.0
        elif isinstance(action, TakeTokens):
            gems_acquired = action.gems
            target_card = self._find_best_target_card(view)
            if target_card:
                needed = self._missing_gems(player, target_card)
                match_count = sum(1 for color in gems_acquired if needed.get(color, 0) > 0)
                score += match_count * 10.0
                if len(gems_acquired) == 1 and match_count > 0:
                    score += 5.0
            else:
                score += sum(gems_acquired.values()) * 2.0
            if player.total_gems + sum(gems_acquired.values()) > MAX_GEMS_PER_PLAYER:
                score -= 20.0
        elif isinstance(action, DiscardTokens):
            # Prefer returning colors held in bulk, and never gold if avoidable.
            for color, count in action.gems.items():
                if color is GemColor.GOLD:
                    score -= 10.0 * count
                elif player.gems[color] > 3:
                    score += 5.0 * count
        return score

    def _get_card_from_action(self, action: Action, view: GameView) -> Optional[DevelopmentCard]:
        if isinstance(action, BuyCard) and action.is_reserved_buy:
            reserved = view.current_player.reserved_cards
            return reserved[action.index] if 0 <= action.index < len(reserved) else None
        if isinstance(action, ReserveCard) and action.is_deck_reserve:
            return None
        cards = view.board.face_up_cards.get(action.level, ())
        if 0 <= action.index < len(cards):
            return cards[action.index]
        return None

    @staticmethod
    def _missing_gems(player: PlayerView, card: DevelopmentCard) -> Dict[GemColor, int]:
        missing = {}
        for color, cost in card.cost.items():
            effective_cost = max(0, cost - player.bonuses.get(color, 0))
            missing[color] = max(0, effective_cost - player.gems[color])
        return missing

    def _find_best_target_card(self, view: GameView) -> Optional[DevelopmentCard]:
        player = view.current_player
        candidates: List[DevelopmentCard] = []
        for level in CARD_LEVELS:
            candidates.extend(view.board.face_up_cards[level])
        candidates.extend(player.reserved_cards)
        best_card = None
        max_roi = -float('inf')
        for card in candidates:
            shortfall = sum(self._missing_gems(player, card).values()) - player.gems[GemColor.GOLD]
            if shortfall > 5:
                continue
            roi = (card.points * 10) + 3 - (max(0, shortfall) * 2)
            if roi > max_roi:
                max_roi = roi
                best_card = card
        return best_card
