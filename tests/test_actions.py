import pytest

from splendor_engine.actions import (
    ActionType,
    BuyCard,
    ReserveCard,
    buy_from_market,
    buy_from_reserved,
    discard,
    reserve_from_market,
    reserve_from_top,
    take,
)
from splendor_engine.constants import GemColor
from splendor_engine.errors import ActionBuildError

W, U, G, R, K = GemColor.get_standard_gems()


def test_take_accepts_color_names_and_members():
    action = take({"white": 1, U: 1, "GREEN": 1})
    assert action.gems == {W: 1, U: 1, G: 1}
    assert action.action_type is ActionType.TAKE_TOKENS


def test_take_keeps_repeated_colors_for_the_validator():
    action = take([("red", 1), ("red", 1)])
    assert action.tokens == ((R, 1), (R, 1))


def test_take_ignores_zero_entries_in_gems():
    assert take({W: 2, U: 0}).gems == {W: 2}


def test_gold_request_still_builds():
    assert take({"gold": 1}).gems == {GemColor.GOLD: 1}


def test_unknown_color_raises_action_build_error():
    with pytest.raises(ActionBuildError):
        take({"purple": 1})


def test_non_integer_amount_raises():
    with pytest.raises(ActionBuildError):
        take({W: "2"})
    with pytest.raises(ActionBuildError):
        discard({W: True})


def test_action_build_error_is_a_value_error():
    with pytest.raises(ValueError):
        buy_from_market("1", 0)


def test_card_constructors():
    assert buy_from_market(2, 3) == BuyCard(index=3, level=2)
    assert buy_from_reserved(1) == BuyCard(index=1, is_reserved_buy=True)
    assert reserve_from_market(3, 0) == ReserveCard(level=3, index=0)
    assert reserve_from_top(1) == ReserveCard(level=1, is_deck_reserve=True)


def test_discard_gems():
    assert discard({"gold": 1, W: 2}).gems == {GemColor.GOLD: 1, W: 2}


def test_reprs():
    assert repr(buy_from_reserved(0)) == "Action(BUY_RESERVED: Card at index 0)"
    assert repr(reserve_from_top(2)) == "Action(RESERVE_DECK: L2)"
    assert repr(take({W: 2})) == "Action(TAKE: white: 2)"
