from collections import Counter

import numpy as np
import pytest

from envs.splendor_env import SplendorEnv, build_action_catalogue
from splendor_engine.actions import BuyCard, DiscardTokens, ReserveCard, TakeTokens


def test_catalogue_layout():
    catalogue = build_action_catalogue()
    kinds = Counter(type(action) for action in catalogue)
    assert len(catalogue) == 128
    assert kinds[TakeTokens] == 15
    assert kinds[BuyCard] == 15
    assert kinds[ReserveCard] == 15
    assert kinds[DiscardTokens] == 83
    assert len(set(catalogue)) == 128


def test_reset_gives_a_masked_observation():
    env = SplendorEnv(num_players=2)
    env.reset(seed=3)
    assert env.agent_selection == "player_0"
    obs = env.observe("player_0")
    assert obs["observation"].shape == (env.OBS_VECTOR_SIZE,)
    assert obs["observation"].dtype == np.float32
    assert obs["action_mask"].sum() == 30
    assert env.observe("player_1")["action_mask"].sum() == 0


def test_invalid_action_truncates():
    env = SplendorEnv(num_players=2)
    env.reset(seed=3)
    illegal = int(np.flatnonzero(env.observe("player_0")["action_mask"] == 0)[0])
    env.step(illegal)
    assert all(env.truncations.values())
    assert "error" in env.infos["player_0"]


@pytest.mark.parametrize("num_players", [2, 3])
def test_random_masked_play_ends_in_termination_or_truncation(num_players):
    env = SplendorEnv(num_players=num_players, max_turns=300)
    env.reset(seed=11)
    rng = np.random.default_rng(0)
    for _ in range(5000):
        if any(env.terminations.values()) or any(env.truncations.values()):
            break
        obs = env.observe(env.agent_selection)
        assert obs["observation"].min() >= 0.0 and obs["observation"].max() <= 1.0
        legal = np.flatnonzero(obs["action_mask"])
        env.step(int(rng.choice(legal)))
    assert any(env.terminations.values()) or any(env.truncations.values())
    if any(env.terminations.values()):
        assert sorted(env.rewards.values()) == [-1.0] * (num_players - 1) + [1.0]


def test_invalid_player_count():
    with pytest.raises(ValueError):
        SplendorEnv(num_players=5)
