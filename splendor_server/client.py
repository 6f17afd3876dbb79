# splendor_server/client.py

"""
Minimal line client: forwards stdin to the server and prints every line the
server sends, highlighting the ones that need an answer.
"""

import argparse
import asyncio
import sys
from typing import Optional, Sequence

from rich.console import Console

console = Console()

PROMPT_STYLES = {
    "YOUR_TURN": "bold green",
    "DISCARD_NEEDED": "bold yellow",
    "NOBLE_CHOICE": "bold magenta",
    "GAME_OVER": "bold cyan",
    "GAME_ABORTED": "bold red",
}


def style_for(line: str) -> Optional[str]:
    keyword = line.split(" ", 1)[0]
    if keyword in PROMPT_STYLES:
        return PROMPT_STYLES[keyword]
    if line.startswith("RESULT ERROR"):
        return "red"
    return None


async def _print_server_lines(reader: asyncio.StreamReader) -> None:
    while True:
        raw = await reader.readline()
        if not raw:
            console.print("[dim]Server closed the connection.[/dim]")
            return
        line = raw.decode("utf-8", errors="replace").rstrip("\n")
        console.print(line, style=style_for(line), markup=False, highlight=False)


async def _forward_stdin(writer: asyncio.StreamWriter) -> None:
    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, sys.stdin.readline)
        if not line:
            writer.write(b"QUIT\n")
            await writer.drain()
            return
        writer.write(line.encode("utf-8"))
        await writer.drain()


async def run_client(host: str, port: int, name: Optional[str] = None) -> None:
    reader, writer = await asyncio.open_connection(host, port)
    if name:
        writer.write(f"JOIN {name}\n".encode("utf-8"))
        await writer.drain()
    printer = asyncio.create_task(_print_server_lines(reader))
    sender = asyncio.create_task(_forward_stdin(writer))
    await printer
    sender.cancel()
    writer.close()


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Connect to a Splendor game server")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Server address")
    parser.add_argument("--port", type=int, default=5555, help="Server port")
    parser.add_argument("--name", type=str, default=None, help="Send JOIN <name> on connect")
    args = parser.parse_args(argv)
    try:
        asyncio.run(run_client(args.host, args.port, args.name))
    except ConnectionRefusedError:
        console.print(f"[red]Could not connect to {args.host}:{args.port}[/red]")
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
