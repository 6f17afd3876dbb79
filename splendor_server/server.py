# splendor_server/server.py

"""
asyncio TCP server for the line protocol.

Each connection gets a PlayerSession in the current GameRoom. Inbound lines
are handed to the room one at a time and the returned messages are written
to the matching connections; the server itself holds no game logic. Once a
room has finished, new connections go to a fresh room.
"""

import argparse
import asyncio
import logging
import os
from typing import Dict, Iterable, Optional, Sequence

import yaml
from rich.console import Console
from rich.logging import RichHandler

from .protocol import result_error
from .session import GameRoom, Message, PlayerSession, SessionState

logger = logging.getLogger(__name__)

project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CONFIG_PATH = os.path.join(project_root, "configs", "server_config.yaml")

# Longest inbound line accepted; longer ones are refused and skipped.
MAX_LINE_BYTES = 2 ** 16

DEFAULT_CONFIG = {
    "host": "127.0.0.1",
    "port": 5555,
    "players": 2,
    "seed": None,
    "log_level": "INFO",
}


def load_config(config_path: Optional[str] = None) -> dict:
    """Reads the YAML config, falling back to the defaults for missing keys."""
    config = dict(DEFAULT_CONFIG)
    path = config_path or DEFAULT_CONFIG_PATH
    if config_path is not None and not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    if os.path.exists(path):
        with open(path, 'r', encoding='utf-8') as f:
            config.update(yaml.safe_load(f) or {})
    return config


class SplendorServer:
    def __init__(self, host: str = "127.0.0.1", port: int = 5555, num_players: int = 2,
                 seed: Optional[int] = None):
        self.host = host
        self.port = port
        self.num_players = num_players
        self.seed = seed
        self.room = GameRoom(num_players, seed)
        self.writers: Dict[PlayerSession, asyncio.StreamWriter] = {}
        self._server: Optional[asyncio.AbstractServer] = None

    def _current_room(self) -> GameRoom:
        if self.room.closed:
            logger.info("Previous game finished; opening a new room")
            self.room = GameRoom(self.num_players, self.seed)
        return self.room

    async def handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        room = self._current_room()
        session = room.connect()
        self.writers[session] = writer
        peer = writer.get_extra_info("peername")
        logger.info("Connection from %s as session %d", peer, session.session_id)
        try:
            while session.state is not SessionState.DONE:
                try:
                    raw = await reader.readuntil(b"\n")
                except asyncio.IncompleteReadError as e:
                    raw = e.partial
                    if not raw:
                        break
                except asyncio.LimitOverrunError:
                    logger.warning("Line over %d bytes from %s; skipped", MAX_LINE_BYTES, peer)
                    await self._skip_line(reader)
                    await self.dispatch([(session, result_error("Line too long"))])
                    continue
                line = raw.decode("utf-8", errors="replace").strip()
                if not line:
                    continue
                if session.state is SessionState.AWAITING_JOIN and room.closed:
                    # Unseated sessions follow the server to its newest room.
                    room = self._current_room()
                await self.dispatch(room.handle_line(session, line))
        except ConnectionError as e:
            logger.warning("Connection error from %s: %s", peer, e)
        finally:
            await self.dispatch(room.disconnect(session))
            self.writers.pop(session, None)
            writer.close()
            try:
                await writer.wait_closed()
            except ConnectionError:
                pass
            logger.info("Closed session %d", session.session_id)

    @staticmethod
    async def _skip_line(reader: asyncio.StreamReader) -> None:
        """Drops buffered input up to and including the next newline."""
        while True:
            try:
                await reader.readuntil(b"\n")
                return
            except asyncio.LimitOverrunError as e:
                await reader.readexactly(e.consumed)
            except asyncio.IncompleteReadError:
                return

    async def dispatch(self, messages: Iterable[Message]) -> None:
        """Writes each line to its session, then hangs up on sessions that are DONE."""
        touched: Dict[PlayerSession, asyncio.StreamWriter] = {}
        for session, line in messages:
            writer = self.writers.get(session)
            if writer is None or writer.is_closing():
                continue
            writer.write((line + "\n").encode("utf-8"))
            touched[session] = writer
        for session, writer in touched.items():
            try:
                await writer.drain()
            except ConnectionError as e:
                logger.warning("Failed to deliver to %s: %s", writer.get_extra_info("peername"), e)
            if session.state is SessionState.DONE and not writer.is_closing():
                writer.close()

    async def start(self) -> None:
        self._server = await asyncio.start_server(self.handle_client, self.host, self.port,
                                                  limit=MAX_LINE_BYTES)
        sockets = self._server.sockets or []
        if sockets:
            self.port = sockets[0].getsockname()[1]
        logger.info("Listening on %s:%d for %d-player games", self.host, self.port, self.num_players)

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        async with self._server:
            await self._server.serve_forever()

    async def close(self) -> None:
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run a Splendor game server")
    parser.add_argument("--config", type=str, default=None, help="Path to a YAML config file")
    parser.add_argument("--host", type=str, default=None, help="Bind address (Overrides config)")
    parser.add_argument("--port", type=int, default=None, help="TCP port (Overrides config)")
    parser.add_argument("--players", type=int, default=None, help="Seats per game, 2-4 (Overrides config)")
    parser.add_argument("--seed", type=int, default=None, help="Shuffle seed (Overrides config)")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (Overrides config)")
    args = parser.parse_args(argv)

    console = Console()
    try:
        config = load_config(args.config)
    except (OSError, yaml.YAMLError) as e:
        console.print(f"[red]Error loading config: {e}[/red]")
        return

    for key in ("host", "port", "players", "seed", "log_level"):
        value = getattr(args, key)
        if value is not None:
            config[key] = value

    logging.basicConfig(level=str(config["log_level"]).upper(), format="%(message)s",
                        handlers=[RichHandler(rich_tracebacks=True)])

    server = SplendorServer(config["host"], int(config["port"]), int(config["players"]), config["seed"])
    console.print(f"[bold blue]Splendor server[/bold blue] on {config['host']}:{config['port']} "
                  f"({config['players']} players per game)")
    try:
        asyncio.run(server.serve_forever())
    except KeyboardInterrupt:
        console.print("[yellow]Server stopped.[/yellow]")


if __name__ == "__main__":
    main()
