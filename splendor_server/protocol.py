# splendor_server/protocol.py

"""
Line protocol spoken between the server and its clients.

Every message is a single UTF-8 line. Client commands are parsed into
small command objects here; nothing in this module touches a Game.

Client -> server:
    JOIN <name>
    ACTION TAKE <color[:n],...>
    ACTION BUY MARKET <tier> <index> | ACTION BUY RESERVED <index>
    ACTION RESERVE MARKET <tier> <index> | ACTION RESERVE TOP <tier>
    DISCARD <color:n,...>
    NOBLE <index|-1>
    STATE
    QUIT

Server -> client:
    RESULT OK | RESULT ERROR <msg> | WELCOME <seat> <name> | WAITING <j>/<n>
    YOUR_TURN | DISCARD_NEEDED <n> | NOBLE_CHOICE <n> + NOBLE <i> <desc> lines
    STATE ... ENDSTATE | GAME_OVER <winner> | GAME_ABORTED <name>
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

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
from splendor_engine.constants import CARD_LEVELS
from splendor_engine.errors import ActionBuildError, SplendorError
from splendor_engine.state import GameView


class ProtocolError(SplendorError, ValueError):
    """A line that does not follow the protocol grammar."""


# --- Commands ---

@dataclass(frozen=True)
class JoinCommand:
    name: str


@dataclass(frozen=True)
class ActionCommand:
    action: Action


@dataclass(frozen=True)
class DiscardCommand:
    action: DiscardTokens


@dataclass(frozen=True)
class NobleCommand:
    index: int


@dataclass(frozen=True)
class StateCommand:
    pass


@dataclass(frozen=True)
class QuitCommand:
    pass


Command = Union[JoinCommand, ActionCommand, DiscardCommand, NobleCommand, StateCommand, QuitCommand]


# --- Parsing ---

def _parse_int(text: str, what: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise ProtocolError(f"{what} must be an integer, got '{text}'") from None


def parse_token_list(text: str) -> List[Tuple[str, int]]:
    """
    Parses "white,blue:2,red" into [("white", 1), ("blue", 2), ("red", 1)].
    Colors are checked later by the action constructors.
    """
    pairs = []
    for item in text.split(","):
        item = item.strip()
        if not item:
            raise ProtocolError(f"Empty entry in token list '{text}'")
        color, sep, amount = item.partition(":")
        pairs.append((color.strip().lower(), _parse_int(amount.strip(), "Token amount") if sep else 1))
    return pairs


def _expect_args(args: List[str], count: int, usage: str) -> None:
    if len(args) != count:
        raise ProtocolError(f"Usage: {usage}")


def _parse_card_action(verb: str, args: List[str]) -> Action:
    if not args:
        raise ProtocolError(f"Usage: ACTION {verb} MARKET <tier> <index> | ...")
    source, rest = args[0].upper(), args[1:]
    if source == "MARKET":
        _expect_args(rest, 2, f"ACTION {verb} MARKET <tier> <index>")
        tier, index = _parse_int(rest[0], "Tier"), _parse_int(rest[1], "Index")
        return buy_from_market(tier, index) if verb == "BUY" else reserve_from_market(tier, index)
    if verb == "BUY" and source == "RESERVED":
        _expect_args(rest, 1, "ACTION BUY RESERVED <index>")
        return buy_from_reserved(_parse_int(rest[0], "Index"))
    if verb == "RESERVE" and source == "TOP":
        _expect_args(rest, 1, "ACTION RESERVE TOP <tier>")
        return reserve_from_top(_parse_int(rest[0], "Tier"))
    raise ProtocolError(f"Unknown card source '{args[0]}' for {verb}")


def _parse_action(args: List[str]) -> Action:
    if not args:
        raise ProtocolError("Usage: ACTION TAKE|BUY|RESERVE ...")
    verb = args[0].upper()
    if verb == "TAKE":
        if len(args) < 2:
            raise ProtocolError("Usage: ACTION TAKE <color[:n],...>")
        return take(parse_token_list("".join(args[1:])))
    if verb in ("BUY", "RESERVE"):
        return _parse_card_action(verb, args[1:])
    raise ProtocolError(f"Unknown action '{args[0]}'")


def parse_line(line: str) -> Command:
    """Parses one client line, raising ProtocolError when it is malformed."""
    parts = line.strip().split()
    if not parts:
        raise ProtocolError("Empty command")
    keyword, args = parts[0].upper(), parts[1:]

    try:
        if keyword == "JOIN":
            _expect_args(args, 1, "JOIN <name> (one word)")
            return JoinCommand(args[0])
        if keyword == "ACTION":
            return ActionCommand(_parse_action(args))
        if keyword == "DISCARD":
            if not args:
                raise ProtocolError("Usage: DISCARD <color:n,...>")
            return DiscardCommand(discard(parse_token_list("".join(args))))
        if keyword == "NOBLE":
            _expect_args(args, 1, "NOBLE <index|-1>")
            return NobleCommand(_parse_int(args[0], "Noble index"))
        if keyword == "STATE":
            return StateCommand()
        if keyword == "QUIT":
            return QuitCommand()
    except ActionBuildError as e:
        raise ProtocolError(str(e)) from e
    raise ProtocolError(f"Unknown command '{parts[0]}'")


# --- Server lines ---

def format_tokens(tokens) -> str:
    text = ",".join(f"{c.value}:{v}" for c, v in tokens.items() if v)
    return text or "-"


def describe_card(card: DevelopmentCard) -> str:
    return f"#{card.card_id} L{card.level} {card.points}P {card.gem_type.value} cost={format_tokens(card.cost)}"


def describe_noble(noble: NobleTile) -> str:
    return f"{noble.name} {noble.points}P req={format_tokens(noble.cost)}"


def result_ok() -> str:
    return "RESULT OK"


def result_error(message: str) -> str:
    return f"RESULT ERROR {message}"


def noble_choice_lines(nobles: List[NobleTile]) -> List[str]:
    lines = [f"NOBLE_CHOICE {len(nobles)}"]
    lines.extend(f"NOBLE {i} {describe_noble(noble)}" for i, noble in enumerate(nobles))
    return lines


def render_state(view: GameView, viewer_seat: Optional[int] = None) -> List[str]:
    """
    Dumps a snapshot as STATE ... ENDSTATE. Reserved cards are listed in
    full only for the viewing seat; other seats show a count.
    """
    lines = ["STATE"]
    if view.current_player is not None:
        lines.append(f"TURN {view.current_player_index} {view.current_player.name}")
    lines.append(f"SUPPLY {format_tokens(view.board.gem_stacks)}")
    for i, noble in enumerate(view.board.nobles):
        lines.append(f"BOARD_NOBLE {i} {describe_noble(noble)}")
    for level in CARD_LEVELS:
        lines.append(f"DECK {level} {view.board.deck_sizes[level]}")
        for i, card in enumerate(view.board.face_up_cards[level]):
            lines.append(f"MARKET {level} {i} {describe_card(card)}")
    for seat, player in enumerate(view.players):
        lines.append(
            f"PLAYER {seat} {player.name} score={player.score} tokens={format_tokens(player.gems)} "
            f"bonuses={format_tokens(player.bonuses)} cards={len(player.cards)} "
            f"reserved={len(player.reserved_cards)} nobles={len(player.nobles)}"
        )
        if seat == viewer_seat:
            for i, card in enumerate(player.reserved_cards):
                lines.append(f"RESERVED {i} {describe_card(card)}")
    lines.append("ENDSTATE")
    return lines
