import pytest

from splendor_engine.actions import buy_from_market, discard, reserve_from_top, take
from splendor_engine.constants import GemColor
from splendor_engine.errors import PhaseError
from splendor_engine.game import TurnPhase
from splendor_engine.player import Player
from splendor_engine.turns import EndGameManager, TurnManager

from conftest import finish_turn, give, make_card, make_game, make_noble

W, U, G, R, K = GemColor.get_standard_gems()
GOLD = GemColor.GOLD


def test_turn_passes_in_seat_order_and_wraps():
    game = make_game(names=("A", "B", "C"))
    seen = []
    for _ in range(4):
        seen.append(game.current_player_index)
        game.apply_action(take({W: 1, U: 1, G: 1}))
        finish_turn(game)
    assert seen == [0, 1, 2, 0]
    assert game.turn_count == 4


def test_end_turn_before_main_action_raises(simple_game):
    with pytest.raises(PhaseError):
        simple_game.end_turn()


def test_second_main_action_is_rejected(simple_game):
    simple_game.apply_action(take({W: 1, U: 1, G: 1}))
    assert simple_game.last_action == take({W: 1, U: 1, G: 1})
    result = simple_game.validate_action(take({R: 1, K: 1, G: 1}))
    assert not result
    assert result.message == "You have already acted this turn."
    with pytest.raises(PhaseError):
        simple_game.apply_action(take({R: 1, K: 1, G: 1}))


def test_discard_is_not_a_main_action(simple_game):
    give(simple_game.current_player, {W: 1})
    assert simple_game.validate_action(discard({W: 1})).message == "No discard is required right now."
    with pytest.raises(PhaseError):
        simple_game.apply_action(discard({W: 1}))


def test_forced_discard_at_eleven_tokens(simple_game):
    player = simple_game.current_player
    give(player, {K: 4, R: 4})
    simple_game.apply_action(take({W: 1, U: 1, G: 1}))
    assert player.get_total_gems() == 11
    assert simple_game.phase is TurnPhase.DISCARD
    assert simple_game.tokens_over_limit() == 1

    result = simple_game.validate_action(take({W: 1, U: 1, G: 1}))
    assert result.message == "You must first discard down to 10 tokens."
    with pytest.raises(PhaseError):
        simple_game.end_turn()

    simple_game.apply_discard(discard({K: 1}))
    assert player.get_total_gems() == 10
    assert simple_game.phase is TurnPhase.NOBLES
    simple_game.end_turn()
    assert simple_game.current_player_index == 1


def test_discard_can_take_several_rounds(simple_game):
    give(simple_game.current_player, {K: 4, R: 4})
    simple_game.apply_action(take({W: 1, U: 1, G: 1}))
    give(simple_game.current_player, {K: 1})
    simple_game.apply_discard(discard({K: 1}))
    assert simple_game.phase is TurnPhase.DISCARD
    simple_game.apply_discard(discard({R: 1}))
    assert simple_game.phase is TurnPhase.NOBLES


def test_single_claimable_noble_is_auto_claimed():
    card = make_card(gem=R)
    noble = make_noble("Solo", {R: 1})
    game = make_game(markets={1: [card]}, nobles=[noble])
    game.apply_action(buy_from_market(1, 0))
    assert game.auto_claim_noble() == noble
    assert game.current_player.score == 3
    assert game.pending_noble_choices() == []
    with pytest.raises(PhaseError):
        game.claim_noble(noble)


def test_claimed_noble_is_gone_for_the_other_seats():
    noble = make_noble("Solo", {R: 1})
    game = make_game(markets={1: [make_card(gem=R), make_card(gem=R)]}, nobles=[noble])
    game.apply_action(buy_from_market(1, 0))
    assert game.auto_claim_noble() == noble
    game.end_turn()

    game.apply_action(buy_from_market(1, 0))
    assert game.current_player.bonuses[R] == 1
    assert game.get_claimable_nobles_for_current_player() == []
    assert game.pending_noble_choices() == []
    assert game.auto_claim_noble() is None
    assert game.state.board.nobles == []
    assert game.state.players[0].nobles == [noble]
    game.end_turn()


def test_several_nobles_require_a_choice_and_only_one_is_claimed():
    card = make_card(gem=R)
    first, second = make_noble("First", {R: 1}), make_noble("Second", {R: 1})
    game = make_game(markets={1: [card]}, nobles=[first, second])
    game.apply_action(buy_from_market(1, 0))
    assert game.auto_claim_noble() is None
    assert game.pending_noble_choices() == [first, second]
    game.claim_noble(second)
    assert game.pending_noble_choices() == []
    assert game.current_player.nobles == [second]
    assert game.state.board.nobles == [first]
    game.end_turn()


def test_nobles_are_offered_only_after_a_purchase():
    noble = make_noble("Patron", {R: 1})
    game = make_game(nobles=[noble])
    game.current_player.add_card(make_card(gem=R))
    game.apply_action(take({W: 1, U: 1, G: 1}))
    assert game.get_claimable_nobles_for_current_player() == [noble]
    assert game.pending_noble_choices() == []
    assert game.auto_claim_noble() is None


def test_end_game_gives_everyone_the_same_number_of_turns():
    game = make_game(names=("A", "B", "C"), decks={1: [make_card() for _ in range(10)]})
    turns = {0: 0, 1: 0, 2: 0}

    # B reaches the threshold on the fifth turn; C still plays before the game ends.
    for turn in range(6):
        assert not game.is_game_over()
        seat = game.current_player_index
        if turn == 4:
            assert seat == 1
            game.current_player.score = 15
        game.apply_action(reserve_from_top(1))
        finish_turn(game)
        turns[seat] += 1

    assert game.is_game_over()
    assert game.phase is TurnPhase.GAME_OVER
    assert turns == {0: 2, 1: 2, 2: 2}
    assert game.determine_winner().name == "B"


def test_game_over_rejects_everything():
    game = make_game(decks={1: [make_card() for _ in range(5)]})
    game.current_player.score = 15
    game.apply_action(reserve_from_top(1))
    finish_turn(game)
    game.apply_action(reserve_from_top(1))
    finish_turn(game)
    assert game.is_game_over()
    assert game.validate_action(take({W: 1, U: 1, G: 1})).message == "The game is over."
    with pytest.raises(PhaseError):
        game.apply_action(take({W: 1, U: 1, G: 1}))


def test_winner_tiebreak_is_fewest_cards():
    a, b = Player("A"), Player("B")
    a.score = b.score = 16
    a.cards = [make_card(), make_card()]
    b.cards = [make_card()]
    assert EndGameManager().determine_winner([a, b]) is b


def test_winner_full_tie_goes_to_earliest_seat():
    a, b = Player("A"), Player("B")
    a.score = b.score = 15
    assert EndGameManager().determine_winner([a, b]) is a
    assert EndGameManager().determine_winner([]) is None


def test_turn_manager_rejects_bad_setup():
    with pytest.raises(ValueError):
        TurnManager(1)
    with pytest.raises(ValueError):
        TurnManager(2, first_player_index=2)


def test_snapshot_is_detached_from_live_state(simple_game):
    view = simple_game.snapshot()
    simple_game.apply_action(take({W: 1, U: 1, G: 1}))
    assert view.board.gem_stacks[W] == 4
    assert view.current_player.total_gems == 0
    with pytest.raises(TypeError):
        view.board.gem_stacks[W] = 0
