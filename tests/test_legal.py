from splendor_engine.actions import BuyCard, ReserveCard, TakeTokens, take
from splendor_engine.constants import GemColor
from splendor_engine.legal import discards_for, get_legal_actions
from splendor_engine.player import Player

from conftest import give, make_card, make_game

W, U, G, R, K = GemColor.get_standard_gems()
GOLD = GemColor.GOLD


def test_opening_position_has_takes_and_reserves_only(seeded_game):
    actions = get_legal_actions(seeded_game)
    takes = [a for a in actions if isinstance(a, TakeTokens)]
    buys = [a for a in actions if isinstance(a, BuyCard)]
    reserves = [a for a in actions if isinstance(a, ReserveCard)]
    assert len(takes) == 15
    assert buys == []
    assert len(reserves) == 15


def test_every_listed_action_validates(seeded_game):
    assert all(seeded_game.validate_action(a) for a in get_legal_actions(seeded_game))


def test_affordable_card_shows_up():
    game = make_game(markets={2: [make_card(level=2, cost={W: 1})]})
    give(game.current_player, {W: 1})
    assert BuyCard(index=0, level=2) in get_legal_actions(game)


def test_discard_phase_lists_only_exact_discards():
    game = make_game()
    give(game.current_player, {W: 5, U: 5})
    game.apply_action(take({W: 1, U: 1, G: 1}))
    actions = get_legal_actions(game)
    assert actions
    assert all(sum(a.gems.values()) == 3 for a in actions)
    assert all(game.validate_action(a) for a in actions)


def test_discards_for_respects_holdings():
    player = Player("P")
    give(player, {W: 5, U: 5, G: 1})
    assert len(discards_for(player, 1)) == 3
    # GG is impossible with a single green token.
    assert len(discards_for(player, 2)) == 5
    assert discards_for(player, 0) == []


def test_nothing_is_legal_after_the_main_action(simple_game):
    simple_game.apply_action(take({W: 1, U: 1, G: 1}))
    assert get_legal_actions(simple_game) == []
