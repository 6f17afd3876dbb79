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
from splendor_server.protocol import (
    ActionCommand,
    DiscardCommand,
    JoinCommand,
    NobleCommand,
    ProtocolError,
    QuitCommand,
    StateCommand,
    noble_choice_lines,
    parse_line,
    parse_token_list,
    render_state,
)

from conftest import make_noble

W, U, G, R, K = GemColor.get_standard_gems()


@pytest.mark.parametrize("line, expected", [
    ("JOIN alice", JoinCommand("alice")),
    ("join Bob", JoinCommand("Bob")),
    ("ACTION TAKE white,blue,green", ActionCommand(take({W: 1, U: 1, G: 1}))),
    ("action take red:2", ActionCommand(take({R: 2}))),
    ("ACTION TAKE white, blue, green", ActionCommand(take({W: 1, U: 1, G: 1}))),
    ("ACTION BUY MARKET 2 3", ActionCommand(buy_from_market(2, 3))),
    ("ACTION BUY RESERVED 1", ActionCommand(buy_from_reserved(1))),
    ("ACTION RESERVE MARKET 1 0", ActionCommand(reserve_from_market(1, 0))),
    ("ACTION RESERVE TOP 3", ActionCommand(reserve_from_top(3))),
    ("DISCARD white:2,gold:1", DiscardCommand(discard({W: 2, GemColor.GOLD: 1}))),
    ("NOBLE 1", NobleCommand(1)),
    ("NOBLE -1", NobleCommand(-1)),
    ("  STATE  ", StateCommand()),
    ("quit", QuitCommand()),
])
def test_parse_line(line, expected):
    assert parse_line(line) == expected


@pytest.mark.parametrize("line", [
    "",
    "HELLO",
    "JOIN",
    "JOIN two words",
    "ACTION",
    "ACTION DANCE",
    "ACTION TAKE",
    "ACTION TAKE purple",
    "ACTION TAKE white:x",
    "ACTION TAKE white,,blue",
    "ACTION BUY MARKET 1",
    "ACTION BUY TOP 1",
    "ACTION RESERVE RESERVED 0",
    "ACTION RESERVE MARKET one 2",
    "DISCARD",
    "NOBLE",
    "NOBLE first",
])
def test_malformed_lines_raise_protocol_error(line):
    with pytest.raises(ProtocolError):
        parse_line(line)


def test_protocol_error_is_a_value_error():
    assert issubclass(ProtocolError, ValueError)


def test_token_list_defaults_to_one():
    assert parse_token_list("WHITE,blue:2") == [("white", 1), ("blue", 2)]


def test_illegal_but_well_formed_take_parses():
    # The validator, not the parser, rejects gold.
    assert parse_line("ACTION TAKE gold") == ActionCommand(take({GemColor.GOLD: 1}))


def test_render_state_shows_reserved_cards_only_to_their_owner(seeded_game):
    seeded_game.apply_action(reserve_from_market(1, 0))
    seeded_game.end_turn()
    view = seeded_game.snapshot()

    own = render_state(view, viewer_seat=0)
    other = render_state(view, viewer_seat=1)
    assert own[0] == "STATE" and own[-1] == "ENDSTATE"
    assert "TURN 1 Bob" in own
    assert any(line.startswith("RESERVED 0 #") for line in own)
    assert not any(line.startswith("RESERVED") for line in other)
    assert sum(line.startswith("MARKET 1 ") for line in own) == 4
    assert any(line.startswith("PLAYER 0 Alice score=0 tokens=gold:1") for line in own)


def test_noble_choice_lines():
    lines = noble_choice_lines([make_noble("First", {R: 3}), make_noble("Second", {K: 4})])
    assert lines == [
        "NOBLE_CHOICE 2",
        "NOBLE 0 First 3P req=red:3",
        "NOBLE 1 Second 3P req=black:4",
    ]
