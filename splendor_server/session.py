# splendor_server/session.py

"""
Seats, per-connection session state and the room that drives one Game.

GameRoom is transport independent: handle_line() takes one inbound line
and returns the outbound (session, line) pairs, running the engine call to
completion before returning. The asyncio server only moves bytes.

Session states:
    AWAITING_JOIN -> WAITING -> AWAITING_ACTION -> [AWAITING_DISCARD]*
        -> [AWAITING_NOBLE_CHOICE] -> WAITING ... -> DONE
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Tuple

from splendor_engine.card import NobleTile
from splendor_engine.constants import MAX_PLAYERS, MIN_PLAYERS
from splendor_engine.factory import create_game
from splendor_engine.game import Game, TurnPhase
from splendor_engine.legal import get_legal_actions

from .protocol import (
    ActionCommand,
    DiscardCommand,
    JoinCommand,
    NobleCommand,
    ProtocolError,
    QuitCommand,
    StateCommand,
    noble_choice_lines,
    parse_line,
    render_state,
    result_error,
    result_ok,
)

logger = logging.getLogger(__name__)


class SessionState(Enum):
    AWAITING_JOIN = "awaiting_join"
    WAITING = "waiting"
    AWAITING_ACTION = "awaiting_action"
    AWAITING_DISCARD = "awaiting_discard"
    AWAITING_NOBLE_CHOICE = "awaiting_noble_choice"
    DONE = "done"


class PlayerSession:
    def __init__(self, session_id: int):
        self.session_id = session_id
        self.name: Optional[str] = None
        self.seat: Optional[int] = None
        self.state = SessionState.AWAITING_JOIN

    def __repr__(self) -> str:
        return f"PlayerSession({self.session_id}, name={self.name!r}, seat={self.seat}, {self.state.value})"


Message = Tuple[PlayerSession, str]

# Why a command is refused, keyed on the state the sender is actually in.
_OUT_OF_TURN_REASONS: Dict[SessionState, str] = {
    SessionState.AWAITING_JOIN: "You must JOIN first.",
    SessionState.WAITING: "It is not your turn.",
    SessionState.AWAITING_ACTION: "You must choose a main action.",
    SessionState.AWAITING_DISCARD: "You must discard first.",
    SessionState.AWAITING_NOBLE_CHOICE: "You must choose a noble first.",
    SessionState.DONE: "This session is closed.",
}


class GameRoom:
    """
    One table: collects JOINs until every seat is taken, then runs the game
    and relays its progress to the seated sessions.
    """

    def __init__(self, num_players: int = 2, seed: Optional[int] = None):
        if not MIN_PLAYERS <= num_players <= MAX_PLAYERS:
            raise ValueError(f"A room needs {MIN_PLAYERS}-{MAX_PLAYERS} seats, got {num_players}")
        self.num_players = num_players
        self.seed = seed
        self.seats: List[PlayerSession] = []
        self.game: Optional[Game] = None
        self.aborted = False
        self._pending_nobles: List[NobleTile] = []
        self._next_session_id = 1

    # --- Queries ---

    @property
    def started(self) -> bool:
        return self.game is not None

    @property
    def closed(self) -> bool:
        """True once the game has ended or been aborted."""
        return self.aborted or (self.game is not None and self.game.is_game_over())

    # --- Connections ---

    def connect(self) -> PlayerSession:
        session = PlayerSession(self._next_session_id)
        self._next_session_id += 1
        logger.debug("Connected %r", session)
        return session

    def disconnect(self, session: PlayerSession) -> List[Message]:
        if session.state is SessionState.DONE:
            return []
        session.state = SessionState.DONE
        if session not in self.seats:
            return []

        if not self.started:
            self.seats.remove(session)
            for seat, other in enumerate(self.seats):
                other.seat = seat
            logger.info("%s left before the game started", session.name)
            return self._broadcast(f"WAITING {len(self.seats)}/{self.num_players}")

        if self.closed:
            return []
        logger.warning("%s disconnected; aborting the game", session.name)
        return self._abort(session.name)

    # --- Inbound lines ---

    def handle_line(self, session: PlayerSession, line: str) -> List[Message]:
        if session.state is SessionState.DONE:
            return [(session, result_error(_OUT_OF_TURN_REASONS[SessionState.DONE]))]
        try:
            command = parse_line(line)
        except ProtocolError as e:
            logger.debug("Bad line from %r: %s", session, e)
            return [(session, result_error(str(e)))]

        if isinstance(command, JoinCommand):
            return self._handle_join(session, command)
        if isinstance(command, ActionCommand):
            return self._handle_action(session, command)
        if isinstance(command, DiscardCommand):
            return self._handle_discard(session, command)
        if isinstance(command, NobleCommand):
            return self._handle_noble(session, command)
        if isinstance(command, StateCommand):
            return self._handle_state(session)
        if isinstance(command, QuitCommand):
            return self.disconnect(session)
        raise TypeError(f"Unhandled command {command!r}")

    def _handle_join(self, session: PlayerSession, command: JoinCommand) -> List[Message]:
        if session.state is not SessionState.AWAITING_JOIN:
            return [(session, result_error("You have already joined."))]
        if self.started or len(self.seats) >= self.num_players:
            return [(session, result_error("The room is full."))]
        if any(other.name == command.name for other in self.seats):
            return [(session, result_error(f"The name {command.name} is already taken."))]

        session.name = command.name
        session.seat = len(self.seats)
        session.state = SessionState.WAITING
        self.seats.append(session)
        logger.info("%s joined seat %d", session.name, session.seat)

        messages = [(session, f"WELCOME {session.seat} {session.name}")]
        messages.extend(self._broadcast(f"WAITING {len(self.seats)}/{self.num_players}"))
        if len(self.seats) == self.num_players:
            messages.extend(self._start_game())
        return messages

    def _handle_action(self, session: PlayerSession, command: ActionCommand) -> List[Message]:
        refusal = self._refuse_unless(session, SessionState.AWAITING_ACTION)
        if refusal:
            return refusal
        result = self.game.validate_action(command.action)
        if not result:
            return [(session, result_error(result.message))]
        self.game.apply_action(command.action)
        return [(session, result_ok())] + self._continue_turn(session)

    def _handle_discard(self, session: PlayerSession, command: DiscardCommand) -> List[Message]:
        refusal = self._refuse_unless(session, SessionState.AWAITING_DISCARD)
        if refusal:
            return refusal
        result = self.game.validate_action(command.action)
        if not result:
            return [(session, result_error(result.message))]
        self.game.apply_discard(command.action)
        return [(session, result_ok())] + self._continue_turn(session)

    def _handle_noble(self, session: PlayerSession, command: NobleCommand) -> List[Message]:
        refusal = self._refuse_unless(session, SessionState.AWAITING_NOBLE_CHOICE)
        if refusal:
            return refusal
        if command.index != -1:
            if not 0 <= command.index < len(self._pending_nobles):
                return [(session, result_error("Noble index is out of range."))]
            self.game.claim_noble(self._pending_nobles[command.index])
        self._pending_nobles = []
        return [(session, result_ok())] + self._finish_turn(session)

    def _handle_state(self, session: PlayerSession) -> List[Message]:
        if not self.started:
            return [(session, result_error("The game has not started."))]
        return [(session, line) for line in render_state(self.game.snapshot(), session.seat)]

    def _refuse_unless(self, session: PlayerSession, expected: SessionState) -> Optional[List[Message]]:
        if not self.started and session.state is SessionState.WAITING:
            return [(session, result_error("The game has not started."))]
        if session.state is not expected:
            return [(session, result_error(_OUT_OF_TURN_REASONS[session.state]))]
        return None

    # --- Turn flow ---

    def _start_game(self) -> List[Message]:
        self.game = create_game([s.name for s in self.seats], seed=self.seed)
        logger.info("Game started: %s", ", ".join(s.name for s in self.seats))
        return self._broadcast_state() + self._prompt_current_player()

    def _continue_turn(self, session: PlayerSession) -> List[Message]:
        if self.game.phase is TurnPhase.DISCARD:
            session.state = SessionState.AWAITING_DISCARD
            return [(session, f"DISCARD_NEEDED {self.game.tokens_over_limit()}")]

        noble = self.game.auto_claim_noble()
        if noble is not None:
            logger.info("%s was visited by %s", session.name, noble.name)
        choices = self.game.pending_noble_choices()
        if choices:
            session.state = SessionState.AWAITING_NOBLE_CHOICE
            self._pending_nobles = choices
            return [(session, line) for line in noble_choice_lines(choices)]
        return self._finish_turn(session)

    def _finish_turn(self, session: PlayerSession) -> List[Message]:
        session.state = SessionState.WAITING
        self.game.end_turn()
        messages = self._broadcast_state()
        if self.game.is_game_over():
            winner = self.game.determine_winner()
            logger.info("Game over; winner %s", winner.name)
            messages.extend(self._broadcast(f"GAME_OVER {winner.name}"))
            for seat in self.seats:
                seat.state = SessionState.DONE
            return messages
        return messages + self._prompt_current_player()

    def _prompt_current_player(self) -> List[Message]:
        current = self.seats[self.game.current_player_index]
        if not get_legal_actions(self.game):
            # Nothing the seat may do is legal, so the game can never finish.
            logger.warning("%s has no legal action; aborting the game", current.name)
            return self._abort(current.name)
        current.state = SessionState.AWAITING_ACTION
        return [(current, "YOUR_TURN")]

    def _abort(self, name: str) -> List[Message]:
        self.aborted = True
        messages = [(seat, f"GAME_ABORTED {name}") for seat in self.seats if seat.state is not SessionState.DONE]
        for seat in self.seats:
            seat.state = SessionState.DONE
        return messages

    # --- Outbound helpers ---

    def _broadcast(self, line: str) -> List[Message]:
        return [(seat, line) for seat in self.seats if seat.state is not SessionState.DONE]

    def _broadcast_state(self) -> List[Message]:
        view = self.game.snapshot()
        messages: List[Message] = []
        for seat in self.seats:
            if seat.state is not SessionState.DONE:
                messages.extend((seat, line) for line in render_state(view, seat.seat))
        return messages
