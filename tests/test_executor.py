import pytest

from splendor_engine.actions import (
    buy_from_market,
    buy_from_reserved,
    discard,
    reserve_from_market,
    reserve_from_top,
    take,
)
from splendor_engine.constants import GemColor
from splendor_engine.errors import InvariantViolation
from splendor_engine.executor import ActionExecutor

from conftest import give, make_card, make_game, make_noble, total_tokens

W, U, G, R, K = GemColor.get_standard_gems()
GOLD = GemColor.GOLD


def run(game, action, player_index=0):
    ActionExecutor().execute(game.state, player_index, action)


def test_take_moves_tokens_and_conserves_totals(simple_game):
    before = total_tokens(simple_game)
    run(simple_game, take({W: 1, U: 1, G: 1}))
    player = simple_game.state.players[0]
    assert player.gems.as_dict() == {W: 1, U: 1, G: 1, R: 0, K: 0, GOLD: 0}
    assert simple_game.state.board.gem_stacks[W] == 3
    assert total_tokens(simple_game) == before


def test_payment_spends_matching_tokens_before_gold():
    card = make_card(points=1, cost={W: 3})
    game = make_game(markets={1: [card]}, supply={W: 0, GOLD: 0})
    player = game.state.players[0]
    give(player, {W: 1, GOLD: 5})
    assert player.get_payment(card) == {W: 1, GOLD: 2}

    run(game, buy_from_market(1, 0))
    assert player.gems[W] == 0
    assert player.gems[GOLD] == 3
    assert game.state.board.gem_stacks[W] == 1
    assert game.state.board.gem_stacks[GOLD] == 2


def test_purchase_updates_score_bonuses_and_cards():
    card = make_card(points=2, gem=K, cost={R: 1})
    game = make_game(markets={1: [card]})
    player = game.state.players[0]
    give(player, {R: 1})
    run(game, buy_from_market(1, 0))
    assert player.score == 2
    assert player.bonuses[K] == 1
    assert player.cards == [card]
    assert len(player.cards) + len(player.reserved_cards) == 1


def test_market_shifts_left_and_refills_at_the_end():
    a, b, c, d = (make_card(card_id=i) for i in (1, 2, 3, 4))
    top = make_card(card_id=5)
    game = make_game(markets={1: [a, b, c, d]}, decks={1: [top]})
    run(game, buy_from_market(1, 1))
    assert game.state.board.face_up(1) == (a, c, d, top)


def test_market_shrinks_when_the_deck_is_empty():
    a, b = make_card(), make_card()
    game = make_game(markets={1: [a, b]})
    run(game, reserve_from_market(1, 0))
    assert game.state.board.face_up(1) == (b,)


def test_reserve_grants_gold_when_available():
    card = make_card()
    game = make_game(markets={1: [card]})
    run(game, reserve_from_market(1, 0))
    player = game.state.players[0]
    assert player.reserved_cards == [card]
    assert player.gems[GOLD] == 1
    assert game.state.board.gem_stacks[GOLD] == 4


def test_reserve_without_gold_in_supply_gives_no_gold():
    game = make_game(supply={W: 4, GOLD: 0}, decks={2: [make_card(level=2)]})
    run(game, reserve_from_top(2))
    player = game.state.players[0]
    assert len(player.reserved_cards) == 1
    assert player.gems[GOLD] == 0


def test_blind_reserve_takes_the_top_of_the_deck():
    bottom, top = make_card(level=3), make_card(level=3)
    game = make_game(decks={3: [bottom, top]})
    run(game, reserve_from_top(3))
    assert game.state.players[0].reserved_cards == [top]
    assert len(game.state.board.decks[3]) == 1


def test_reserve_then_buy_round_trip():
    card = make_card(points=3, gem=U, cost={W: 2})
    game = make_game(markets={1: [card]})
    player = game.state.players[0]
    run(game, reserve_from_market(1, 0))
    give(player, {W: 1})
    run(game, buy_from_reserved(0))
    assert player.reserved_cards == []
    assert player.cards == [card]
    assert player.score == 3
    assert player.gems.total() == 0
    assert game.state.board.gem_stacks[GOLD] == 5


def test_discard_returns_tokens_to_supply(simple_game):
    player = simple_game.state.players[0]
    give(player, {W: 3})
    run(simple_game, discard({W: 2}))
    assert player.gems[W] == 1
    assert simple_game.state.board.gem_stacks[W] == 6


def test_unvalidated_purchase_raises_invariant_violation():
    game = make_game(markets={1: [make_card(cost={W: 3})]})
    with pytest.raises(InvariantViolation):
        run(game, buy_from_market(1, 0))
    assert game.state.board.face_up(1)


def test_unvalidated_take_raises_invariant_violation():
    game = make_game(supply={W: 0})
    with pytest.raises(InvariantViolation):
        run(game, take({W: 1, U: 1, G: 1}))


def test_nonexistent_tier_raises():
    with pytest.raises(InvariantViolation):
        run(make_game(), reserve_from_market(5, 0))


def test_claimable_nobles_and_claim():
    noble = make_noble("Test", {R: 1})
    other = make_noble("Other", {K: 4})
    game = make_game(nobles=[noble, other])
    player = game.state.players[0]
    executor = ActionExecutor()
    assert executor.find_claimable_nobles(game.state.board, player) == []
    player.add_card(make_card(gem=R))
    assert executor.find_claimable_nobles(game.state.board, player) == [noble]
    executor.claim_noble(game.state.board, player, noble)
    assert player.score == 3
    assert game.state.board.nobles == [other]


def test_claiming_an_unqualified_noble_raises():
    noble = make_noble("Test", {R: 1})
    game = make_game(nobles=[noble])
    with pytest.raises(InvariantViolation):
        ActionExecutor().claim_noble(game.state.board, game.state.players[0], noble)
