"""Mock scripting API peers listening on ephemeral ports."""

from __future__ import annotations

import socket
import threading
import time

import pytest


class MockPeer:
    """Accepts one connection and hands it to ``handler(peer, conn)``."""

    def __init__(self, handler) -> None:
        self._listener = socket.create_server(("127.0.0.1", 0))
        self._listener.settimeout(5)
        self.host = "127.0.0.1"
        self.port = self._listener.getsockname()[1]
        self.received = bytearray()
        self._handler = handler
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        try:
            conn, _ = self._listener.accept()
        except OSError:
            return
        with conn:
            self._handler(self, conn)

    def join(self, timeout: float = 5) -> None:
        self._thread.join(timeout)

    def close(self) -> None:
        self._listener.close()
        self.join()


def record(peer: MockPeer, conn: socket.socket) -> None:
    """Store everything received until the client closes."""
    while True:
        data = conn.recv(4096)
        if not data:
            return
        peer.received.extend(data)


def echo(peer: MockPeer, conn: socket.socket) -> None:
    """Send every received line straight back."""
    for line in conn.makefile("rb"):
        peer.received.extend(line)
        # Widens the window in which unsynchronized callers would interleave
        time.sleep(0.001)
        conn.sendall(line)


def reply_with(response: bytes):
    """Answer every received line with a fixed response."""

    def handler(peer: MockPeer, conn: socket.socket) -> None:
        for line in conn.makefile("rb"):
            peer.received.extend(line)
            conn.sendall(response)

    return handler


def close_immediately(peer: MockPeer, conn: socket.socket) -> None:
    """Hang up right after accepting."""


@pytest.fixture
def mock_peer():
    """Factory starting a MockPeer with the given handler."""
    peers: list[MockPeer] = []

    def start(handler) -> MockPeer:
        peer = MockPeer(handler)
        peers.append(peer)
        return peer

    yield start
    for peer in peers:
        peer.close()


@pytest.fixture
def unused_port() -> int:
    """A local port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def count_replies(peer: MockPeer, conn: socket.socket) -> None:
    """Answer the n-th received line with ``n``."""
    for n, line in enumerate(conn.makefile("rb"), start=1):
        peer.received.extend(line)
        conn.sendall(f"{n}\n".encode())
