import random
from typing import List, Optional, Sequence

from splendor_engine.actions import Action
from splendor_engine.card import NobleTile
from splendor_engine.state import GameView


class RandomBot:
    def __init__(self, player_id: int, rng: Optional[random.Random] = None):
        self.player_id: int = player_id
        self.name = f"RandomBot (Player {player_id})"
        self.rng = rng or random.Random()

    def choose_action(self, view: GameView, legal_actions: List[Action]) -> Optional[Action]:
        """
        Picks uniformly among the legal actions (main actions or discards,
        whichever the game is waiting for). Returns None when there are none.
        """
        if not legal_actions:
            return None
        return self.rng.choice(legal_actions)

    def choose_noble(self, view: GameView, nobles: Sequence[NobleTile]) -> Optional[NobleTile]:
        if not nobles:
            return None
        return self.rng.choice(list(nobles))
