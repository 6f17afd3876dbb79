import asyncio

import pytest

from splendor_server.server import DEFAULT_CONFIG, MAX_LINE_BYTES, SplendorServer, load_config

TIMEOUT = 5


async def read_line(reader):
    raw = await asyncio.wait_for(reader.readline(), TIMEOUT)
    return raw.decode("utf-8").rstrip("\n")


async def read_until(reader, expected):
    lines = []
    while True:
        line = await read_line(reader)
        lines.append(line)
        if line == expected:
            return lines


async def send(writer, line):
    writer.write((line + "\n").encode("utf-8"))
    await writer.drain()


async def _two_player_session():
    server = SplendorServer("127.0.0.1", 0, num_players=2, seed=7)
    await server.start()
    try:
        r1, w1 = await asyncio.open_connection("127.0.0.1", server.port)
        await send(w1, "JOIN alice")
        assert await read_line(r1) == "WELCOME 0 alice"
        assert await read_line(r1) == "WAITING 1/2"

        r2, w2 = await asyncio.open_connection("127.0.0.1", server.port)
        await send(w2, "JOIN bob")
        alice_lines = await read_until(r1, "YOUR_TURN")
        assert "STATE" in alice_lines

        await send(w2, "ACTION TAKE white,blue,green")
        assert await read_until(r2, "RESULT ERROR It is not your turn.")

        await send(w1, "ACTION TAKE white,blue,green")
        assert await read_line(r1) == "RESULT OK"
        await read_until(r2, "YOUR_TURN")

        await send(w2, "QUIT")
        await read_until(r1, "GAME_ABORTED bob")
        assert await asyncio.wait_for(r1.readline(), TIMEOUT) == b""

        w1.close()
        w2.close()
    finally:
        await server.close()


def test_server_relays_a_short_game():
    asyncio.run(_two_player_session())


def test_load_config_defaults_and_file(tmp_path):
    path = tmp_path / "server.yaml"
    path.write_text("port: 6000\nplayers: 3\n", encoding="utf-8")
    config = load_config(str(path))
    assert config["port"] == 6000
    assert config["players"] == 3
    assert config["host"] == DEFAULT_CONFIG["host"]


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))


async def _seat_two(server):
    r1, w1 = await asyncio.open_connection("127.0.0.1", server.port)
    await send(w1, "JOIN alice")
    await read_until(r1, "WAITING 1/2")
    r2, w2 = await asyncio.open_connection("127.0.0.1", server.port)
    await send(w2, "JOIN bob")
    await read_until(r1, "YOUR_TURN")
    await read_until(r2, "ENDSTATE")
    return (r1, w1), (r2, w2)


async def _oversized_line_session():
    server = SplendorServer("127.0.0.1", 0, num_players=2, seed=7)
    await server.start()
    try:
        (r1, w1), (r2, w2) = await _seat_two(server)

        await send(w2, "STATE " + "x" * (MAX_LINE_BYTES + 5000))
        assert await read_line(r2) == "RESULT ERROR Line too long"
        await send(w2, "STATE")
        assert (await read_until(r2, "ENDSTATE"))[0] == "STATE"

        await send(w1, "ACTION TAKE white,blue,green")
        assert await read_line(r1) == "RESULT OK"
        assert not server.room.aborted

        w1.close()
        w2.close()
    finally:
        await server.close()


def test_oversized_line_is_refused_without_ending_the_game():
    asyncio.run(_oversized_line_session())


async def _late_joiner_session():
    server = SplendorServer("127.0.0.1", 0, num_players=2, seed=7)
    await server.start()
    try:
        (r1, w1), (r2, w2) = await _seat_two(server)

        r3, w3 = await asyncio.open_connection("127.0.0.1", server.port)
        await send(w3, "JOIN carol")
        assert await read_line(r3) == "RESULT ERROR The room is full."

        await send(w2, "QUIT")
        await read_until(r1, "GAME_ABORTED bob")

        await send(w3, "JOIN carol")
        assert await read_line(r3) == "WELCOME 0 carol"
        assert await read_line(r3) == "WAITING 1/2"
        assert not server.room.closed

        for w in (w1, w2, w3):
            w.close()
    finally:
        await server.close()


def test_refused_joiner_moves_to_the_next_room():
    asyncio.run(_late_joiner_session())
