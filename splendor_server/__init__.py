# splendor_server/__init__.py

"""
Networked play over a plain line protocol.

Modules:
- protocol.py: Command parsing and the server's reply lines.
- session.py: PlayerSession state and the GameRoom that runs one Game.
- server.py: asyncio TCP server and the splendor-server entry point.
- client.py: stdin/stdout line client.
"""

from .protocol import ProtocolError, parse_line, render_state
from .session import GameRoom, PlayerSession, SessionState

__all__ = [
    'GameRoom',
    'PlayerSession',
    'SessionState',
    'ProtocolError',
    'parse_line',
    'render_state',
]
