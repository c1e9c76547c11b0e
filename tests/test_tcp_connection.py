"""Tests for the TCP line protocol connection against mock peers."""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from conftest import close_immediately, echo, record, reply_with
from minecraft_mcp.transport.tcp_connection import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    AlreadyOpen,
    ConnectionFailed,
    ConnectionState,
    LineProtocolConnection,
    NotConnected,
)


def _open(peer) -> LineProtocolConnection:
    conn = LineProtocolConnection(peer.host, peer.port)
    conn.open()
    return conn


def test_defaults():
    conn = LineProtocolConnection()
    assert conn.host == DEFAULT_HOST == "localhost"
    assert conn.port == DEFAULT_PORT == 4711
    assert conn.state is ConnectionState.UNOPENED
    assert not conn.connected


def test_send_writes_exact_bytes(mock_peer):
    """send('events.clear') puts exactly one empty-argument line on the wire."""
    peer = mock_peer(record)
    conn = _open(peer)
    assert conn.state is ConnectionState.OPEN
    conn.send("events.clear")
    conn.close()
    peer.join()
    assert bytes(peer.received) == b"events.clear()\n"


def test_send_flattens_arguments(mock_peer):
    peer = mock_peer(record)
    conn = _open(peer)
    conn.send("cmd", ["a", [1, 2]])
    conn.send("world.setBlock", (0, 1, 2, 3))
    conn.close()
    peer.join()
    assert bytes(peer.received) == b"cmd(a,1,2)\nworld.setBlock(0,1,2,3)\n"


def test_send_and_receive_strips_terminator(mock_peer):
    peer = mock_peer(reply_with(b"42\n"))
    conn = _open(peer)
    assert conn.send_and_receive("world.getBlock", [0, 0, 0]) == "42"
    conn.close()
    peer.join()
    assert bytes(peer.received) == b"world.getBlock(0,0,0)\n"


def test_send_then_receive(mock_peer):
    peer = mock_peer(reply_with(b"1,2,3\n"))
    conn = _open(peer)
    conn.send("player.getTile")
    assert conn.receive() == "1,2,3"
    conn.close()


def test_receive_after_peer_hangs_up(mock_peer):
    """End-of-stream yields None rather than an error."""
    peer = mock_peer(close_immediately)
    conn = _open(peer)
    peer.join()
    assert conn.receive() is None
    conn.close()


def test_concurrent_send_and_receive_pairs_replies(mock_peer):
    """Each caller gets the echo of its own request, never another's."""
    peer = mock_peer(echo)
    conn = _open(peer)
    count = 32
    start = threading.Barrier(count)

    def call(i: int) -> tuple[int, str | None]:
        start.wait()
        return i, conn.send_and_receive("echo", [i, f"caller-{i}"])

    with ThreadPoolExecutor(max_workers=count) as pool:
        results = list(pool.map(call, range(count)))

    conn.close()
    for i, response in results:
        assert response == f"echo({i},caller-{i})"


def test_operations_after_close_are_silent(mock_peer):
    peer = mock_peer(record)
    conn = _open(peer)
    conn.close()
    assert conn.state is ConnectionState.CLOSED
    assert not conn.connected
    conn.send("chat.post", ["too late"])
    assert conn.receive() is None
    assert conn.send_and_receive("world.getBlock", [0, 0, 0]) is None
    peer.join()
    assert bytes(peer.received) == b""


def test_close_is_idempotent(mock_peer):
    peer = mock_peer(record)
    conn = _open(peer)
    conn.close()
    conn.close()
    assert conn.state is ConnectionState.CLOSED


def test_close_unopened_connection():
    """Closing before opening is allowed and makes later sends no-ops."""
    conn = LineProtocolConnection()
    conn.close()
    conn.send("chat.post", ["x"])
    assert conn.receive() is None


def test_close_wakes_blocked_receive(mock_peer):
    """A receive blocked on a silent peer returns None once closed."""
    peer = mock_peer(record)
    conn = _open(peer)
    with ThreadPoolExecutor(max_workers=1) as pool:
        pending = pool.submit(conn.receive)
        time.sleep(0.1)
        conn.close()
        assert pending.result(timeout=5) is None


def test_open_refused_raises_connection_failed(unused_port):
    conn = LineProtocolConnection("127.0.0.1", unused_port)
    with pytest.raises(ConnectionFailed) as excinfo:
        conn.open()
    assert isinstance(excinfo.value, ConnectionError)
    assert isinstance(excinfo.value.__cause__, OSError)
    assert excinfo.value.port == unused_port
    assert conn.state is ConnectionState.UNOPENED


def test_open_twice_raises(mock_peer):
    peer = mock_peer(record)
    conn = _open(peer)
    with pytest.raises(AlreadyOpen):
        conn.open()
    conn.close()
    with pytest.raises(AlreadyOpen):
        conn.open()


def test_target_fixed_once_opened(mock_peer):
    conn = LineProtocolConnection()
    conn.host = "127.0.0.1"
    conn.port = 4712
    assert (conn.host, conn.port) == ("127.0.0.1", 4712)

    peer = mock_peer(record)
    conn = _open(peer)
    with pytest.raises(AlreadyOpen):
        conn.port = 1
    conn.close()


def test_use_before_open_raises():
    conn = LineProtocolConnection()
    with pytest.raises(NotConnected):
        conn.send("events.clear")
    with pytest.raises(NotConnected):
        conn.receive()
    with pytest.raises(NotConnected):
        conn.send_and_receive("world.getHeight", [0, 0])


def test_io_error_while_open_propagates(mock_peer):
    """Only errors caused by closing are swallowed."""
    peer = mock_peer(record)
    conn = _open(peer)
    writer = conn._writer
    conn._writer = MagicMock()
    conn._writer.write.side_effect = ConnectionResetError("reset by peer")
    with pytest.raises(ConnectionResetError):
        conn.send("chat.post", ["hi"])
    conn._writer = writer
    conn.close()


def test_context_manager(mock_peer):
    peer = mock_peer(record)
    with LineProtocolConnection(peer.host, peer.port) as conn:
        assert conn.connected
        conn.send("chat.post", ["hi"])
    assert conn.state is ConnectionState.CLOSED
    peer.join()
    assert bytes(peer.received) == b"chat.post(hi)\n"


def test_event_polling_not_logged(mock_peer, caplog):
    """Sent lines are logged at debug level, except events.* polling."""
    peer = mock_peer(record)
    conn = _open(peer)
    with caplog.at_level(logging.DEBUG, logger="minecraft_mcp.transport.tcp_connection"):
        conn.send("chat.post", ["hi"])
        conn.send("events.clear")
    conn.close()
    messages = [r.getMessage() for r in caplog.records]
    assert "Sending: chat.post(hi)" in messages
    assert not any("events.clear" in m for m in messages)
