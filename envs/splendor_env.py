import itertools
from collections import Counter
from typing import Dict, List, Optional

import numpy as np
from gymnasium.spaces import Box, Dict as DictSpace, Discrete
from pettingzoo.utils.env import AECEnv
from rich.console import Console

from splendor_engine.actions import (
    Action,
    DiscardTokens,
    buy_from_market,
    buy_from_reserved,
    discard,
    reserve_from_market,
    reserve_from_top,
    take,
)
from splendor_engine.card import DevelopmentCard, NobleTile
from splendor_engine.constants import (
    CARD_LEVELS,
    FACE_UP_CARDS_PER_LEVEL,
    GOLD_TOKENS,
    MAX_GEMS_PER_PLAYER,
    MAX_PLAYERS,
    MAX_RESERVED_CARDS,
    TOKENS_PER_COLOR,
    WINNING_SCORE,
    GemColor,
)
from splendor_engine.factory import create_game
from splendor_engine.game import Game, TurnPhase
from splendor_engine.main_text import render_board, render_players

# Largest possible excess after one main action: 10 held + 3 taken.
MAX_DISCARD = 3
DEFAULT_MAX_TURNS = 500
MAX_DECK_SIZES = {1: 40, 2: 30, 3: 20}


def env(**kwargs):
    return SplendorEnv(**kwargs)


def build_action_catalogue() -> List[Action]:
    """
    Fixed index -> action table: 15 takes, 15 buys, 15 reserves and 83
    discard multisets of one to three tokens (gold included).
    """
    catalogue: List[Action] = []
    standard_gems = GemColor.get_standard_gems()
    for combo in itertools.combinations(standard_gems, 3):
        catalogue.append(take({c: 1 for c in combo}))
    for color in standard_gems:
        catalogue.append(take({color: 2}))
    for level in CARD_LEVELS:
        for index in range(FACE_UP_CARDS_PER_LEVEL):
            catalogue.append(buy_from_market(level, index))
    for index in range(MAX_RESERVED_CARDS):
        catalogue.append(buy_from_reserved(index))
    for level in CARD_LEVELS:
        for index in range(FACE_UP_CARDS_PER_LEVEL):
            catalogue.append(reserve_from_market(level, index))
    for level in CARD_LEVELS:
        catalogue.append(reserve_from_top(level))
    for k in range(1, MAX_DISCARD + 1):
        for combo in itertools.combinations_with_replacement(GemColor.get_all_gems(), k):
            catalogue.append(discard(dict(Counter(combo))))
    return catalogue


class SplendorEnv(AECEnv):
    metadata = {
        "name": "splendor_v1",
        "render_modes": ["human"],
        "is_parallelizable": False,
    }

    def __init__(self, num_players: int = 2, max_turns: int = DEFAULT_MAX_TURNS, render_mode: Optional[str] = None):
        super().__init__()
        if num_players not in TOKENS_PER_COLOR:
            raise ValueError(f"Invalid number of players: {num_players}")
        self.num_players = num_players
        self.max_turns = max_turns
        self.render_mode = render_mode
        self.game: Optional[Game] = None

        self.possible_agents = [f"player_{i}" for i in range(self.num_players)]
        self.agents = self.possible_agents[:]
        self.agent_selection: str = self.agents[0]

        self.catalogue = build_action_catalogue()
        self.TOTAL_ACTIONS = len(self.catalogue)

        self._gem_colors_all = GemColor.get_all_gems()
        self._gem_colors_standard = GemColor.get_standard_gems()
        self._card_feature_size = 2 + 2 * len(self._gem_colors_standard)
        self._noble_feature_size = 1 + len(self._gem_colors_standard)
        self._max_nobles = MAX_PLAYERS + 1
        self.OBS_VECTOR_SIZE = self.calculate_obs_size()

        self.action_spaces = {agent: Discrete(self.TOTAL_ACTIONS) for agent in self.possible_agents}
        self.observation_spaces = {
            agent: DictSpace({
                "observation": Box(low=0.0, high=1.0, shape=(self.OBS_VECTOR_SIZE,), dtype=np.float32),
                "action_mask": Box(low=0, high=1, shape=(self.TOTAL_ACTIONS,), dtype=np.int8),
            })
            for agent in self.possible_agents
        }
        self._reset_bookkeeping()

    def _reset_bookkeeping(self) -> None:
        self.rewards = {agent: 0.0 for agent in self.agents}
        self._cumulative_rewards = {agent: 0.0 for agent in self.agents}
        self.terminations = {agent: False for agent in self.agents}
        self.truncations = {agent: False for agent in self.agents}
        self.infos = {agent: {} for agent in self.agents}

    # --- Observation encoding ---

    def calculate_obs_size(self) -> int:
        player_state_size = (len(self._gem_colors_all) + len(self._gem_colors_standard) + 2
                             + MAX_RESERVED_CARDS * self._card_feature_size)
        size = MAX_PLAYERS * player_state_size
        size += len(self._gem_colors_all)
        size += len(CARD_LEVELS)
        size += self._max_nobles * self._noble_feature_size
        size += len(CARD_LEVELS) * FACE_UP_CARDS_PER_LEVEL * self._card_feature_size
        return size

    def encode_card(self, obs: np.ndarray, idx: int, card: DevelopmentCard) -> int:
        obs[idx] = card.level / 3.0
        obs[idx + 1] = card.points / 5.0
        idx += 2
        obs[idx + self._gem_colors_standard.index(card.gem_type)] = 1.0
        idx += len(self._gem_colors_standard)
        for color in self._gem_colors_standard:
            obs[idx] = card.cost.get(color, 0) / 7.0
            idx += 1
        return idx

    def encode_noble(self, obs: np.ndarray, idx: int, noble: NobleTile) -> int:
        obs[idx] = noble.points / 3.0
        idx += 1
        for color in self._gem_colors_standard:
            obs[idx] = noble.cost.get(color, 0) / 4.0
            idx += 1
        return idx

    def get_obs_vector(self, player_id: int) -> np.ndarray:
        """Encodes the board from player_id's seat: own state first, then the others in turn order."""
        obs = np.zeros(self.OBS_VECTOR_SIZE, dtype=np.float32)
        view = self.game.snapshot()
        idx = 0
        player_state_size = (len(self._gem_colors_all) + len(self._gem_colors_standard) + 2
                             + MAX_RESERVED_CARDS * self._card_feature_size)
        for offset in range(self.num_players):
            player = view.players[(player_id + offset) % self.num_players]
            start = idx
            for color in self._gem_colors_all:
                obs[idx] = min(1.0, player.gems[color] / MAX_GEMS_PER_PLAYER)
                idx += 1
            for color in self._gem_colors_standard:
                obs[idx] = min(1.0, player.bonuses[color] / 15.0)
                idx += 1
            obs[idx] = min(1.0, player.score / WINNING_SCORE)
            obs[idx + 1] = len(player.reserved_cards) / MAX_RESERVED_CARDS
            idx += 2
            # Opponents' reserved cards stay hidden; only the count is shown.
            if offset == 0:
                for card in player.reserved_cards:
                    idx = self.encode_card(obs, idx, card)
            idx = start + player_state_size
        idx += (MAX_PLAYERS - self.num_players) * player_state_size

        max_supply = TOKENS_PER_COLOR[MAX_PLAYERS]
        for color in self._gem_colors_standard:
            obs[idx] = view.board.gem_stacks[color] / max_supply
            idx += 1
        obs[idx] = view.board.gem_stacks[GemColor.GOLD] / GOLD_TOKENS
        idx += 1
        for level in CARD_LEVELS:
            obs[idx] = view.board.deck_sizes[level] / MAX_DECK_SIZES[level]
            idx += 1
        for i in range(self._max_nobles):
            if i < len(view.board.nobles):
                idx = self.encode_noble(obs, idx, view.board.nobles[i])
            else:
                idx += self._noble_feature_size
        for level in CARD_LEVELS:
            cards = view.board.face_up_cards[level]
            for i in range(FACE_UP_CARDS_PER_LEVEL):
                if i < len(cards):
                    idx = self.encode_card(obs, idx, cards[i])
                else:
                    idx += self._card_feature_size

        assert idx == self.OBS_VECTOR_SIZE, f"Observation size mismatch: {idx} != {self.OBS_VECTOR_SIZE}"
        return obs

    def get_action_mask(self) -> np.ndarray:
        mask = np.zeros(self.TOTAL_ACTIONS, dtype=np.int8)
        if self.game is None or self.game.phase not in (TurnPhase.MAIN_ACTION, TurnPhase.DISCARD):
            return mask
        for i, action in enumerate(self.catalogue):
            if self.game.validate_action(action):
                mask[i] = 1
        return mask

    def observe(self, agent: str) -> Dict[str, np.ndarray]:
        player_id = self.possible_agents.index(agent)
        mask = self.get_action_mask() if agent == self.agent_selection else np.zeros(self.TOTAL_ACTIONS, np.int8)
        return {"observation": self.get_obs_vector(player_id), "action_mask": mask}

    # --- AEC loop ---

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None) -> None:
        self.game = create_game(self.possible_agents, seed=seed)
        self.agents = self.possible_agents[:]
        self._reset_bookkeeping()
        self.agent_selection = self.agents[self.game.current_player_index]
        self.infos[self.agent_selection]["action_mask"] = self.get_action_mask()

    def step(self, action: int) -> None:
        if self.terminations[self.agent_selection] or self.truncations[self.agent_selection]:
            self._was_dead_step(action)
            return
        current_agent = self.agent_selection
        self._cumulative_rewards[current_agent] = 0.0
        self.rewards = {agent: 0.0 for agent in self.agents}

        mask = self.get_action_mask()
        if action is None or not 0 <= action < self.TOTAL_ACTIONS or mask[action] == 0:
            self.truncations = {agent: True for agent in self.agents}
            self.infos[current_agent]["error"] = f"Invalid action submitted: {action}"
            self._accumulate_rewards()
            return

        chosen = self.catalogue[action]
        if isinstance(chosen, DiscardTokens):
            self.game.apply_discard(chosen)
        else:
            self.game.apply_action(chosen)

        if self.game.phase is TurnPhase.DISCARD:
            # The same agent keeps acting until it is back under the cap.
            self.infos[current_agent]["action_mask"] = self.get_action_mask()
            self._accumulate_rewards()
            return

        if self.game.auto_claim_noble() is None:
            choices = self.game.pending_noble_choices()
            if choices:
                self.game.claim_noble(choices[0])
        self.game.end_turn()

        if self.game.is_game_over():
            winner = self.game.determine_winner()
            winner_id = self.game.state.players.index(winner)
            self.terminations = {agent: True for agent in self.agents}
            for i, agent in enumerate(self.agents):
                self.rewards[agent] = 1.0 if i == winner_id else -1.0
                self.infos[agent] = {"game_winner": winner_id}
        else:
            self.agent_selection = self.agents[self.game.current_player_index]
            next_mask = self.get_action_mask()
            if not next_mask.any():
                self.truncations = {agent: True for agent in self.agents}
                self.infos = {agent: {"game_winner": -1, "deadlock": True} for agent in self.agents}
            elif self.game.turn_count >= self.max_turns:
                self.truncations = {agent: True for agent in self.agents}
                self.infos = {agent: {"game_winner": -1, "max_turns": True} for agent in self.agents}
            else:
                self.infos[self.agent_selection]["action_mask"] = next_mask

        self._accumulate_rewards()
        if self.render_mode == "human":
            self.render()

    def render(self) -> None:
        if self.render_mode == "human" and self.game is not None:
            console = Console()
            view = self.game.snapshot()
            console.rule(f"Turn {self.game.turn_count} - {self.agent_selection} ({self.game.phase.value})")
            console.print(render_board(view))
            console.print(render_players(view))

    def action_space(self, agent: str) -> Discrete:
        return self.action_spaces[agent]

    def observation_space(self, agent: str) -> DictSpace:
        return self.observation_spaces[agent]

    def close(self) -> None:
        pass
