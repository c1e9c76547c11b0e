"""TCP connection to a Minecraft scripting API endpoint.

The game listens on port 4711 and speaks a newline-delimited text
protocol: one ``command(args)`` line per request, at most one reply line
per request. Replies carry no request identifier, so a reply belongs to
whichever request was written immediately before it. Every wire operation
therefore runs under a single gate, and :meth:`send_and_receive` holds
that gate across both its write and its read.
"""

from __future__ import annotations

import logging
import socket
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from enum import Enum
from typing import Any

from ..protocol.framing import build_line, parse_line

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 4711

# Polled in a loop, so their sends are not logged
QUIET_PREFIX = "events."


class ConnectionState(Enum):
    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"


class ConnectionFailed(ConnectionError):
    """The TCP connect to the game failed."""

    def __init__(self, host: str, port: int, error: OSError) -> None:
        super().__init__(
            f"Could not connect to Minecraft at {host}:{port}. "
            f"Ensure the game is running with its scripting API enabled. "
            f"Last error: {error}"
        )
        self.host = host
        self.port = port


class AlreadyOpen(ConnectionError):
    """The connection has already been opened (or opened and closed)."""


class NotConnected(ConnectionError):
    """A wire operation was attempted before :meth:`open`."""


class LineProtocolConnection:
    """Manages one TCP connection to the game's scripting API.

    Usage::

        conn = LineProtocolConnection("localhost", 4711)
        conn.open()
        conn.send("chat.post", ["hello"])
        block = conn.send_and_receive("world.getBlock", [0, 0, 0])
        conn.close()

    Safe to share between threads. Once closed, ``send`` does nothing and
    ``receive``/``send_and_receive`` return ``None`` instead of raising;
    this includes operations that were in flight when ``close`` ran.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        connect_timeout: float | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._connect_timeout = connect_timeout
        self._socket: socket.socket | None = None
        self._reader = None
        self._writer = None
        self._state = ConnectionState.UNOPENED
        # Serializes every read/write on the stream
        self._gate = threading.Lock()
        # Serializes open/close transitions only
        self._lifecycle = threading.Lock()

    def __repr__(self) -> str:
        return (
            f"LineProtocolConnection(host={self._host!r}, port={self._port}, "
            f"state={self._state.value})"
        )

    def __enter__(self) -> LineProtocolConnection:
        if self._state is ConnectionState.UNOPENED:
            self.open()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def host(self) -> str:
        return self._host

    @host.setter
    def host(self, value: str) -> None:
        self._check_configurable()
        self._host = value

    @property
    def port(self) -> int:
        return self._port

    @port.setter
    def port(self, value: int) -> None:
        self._check_configurable()
        self._port = value

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._state is ConnectionState.OPEN

    def _check_configurable(self) -> None:
        if self._state is not ConnectionState.UNOPENED:
            raise AlreadyOpen("Host and port cannot change once the connection is opened")

    def open(self) -> None:
        """Connect to the configured host and port.

        Raises:
            ConnectionFailed: If the socket could not connect (refused,
                unreachable, DNS failure, timeout).
            AlreadyOpen: If ``open`` was already called successfully. A
                closed connection cannot be reopened.
        """
        with self._lifecycle:
            if self._state is not ConnectionState.UNOPENED:
                raise AlreadyOpen(f"Connection is already {self._state.value}")

            try:
                sock = socket.create_connection(
                    (self._host, self._port), timeout=self._connect_timeout
                )
            except OSError as e:
                raise ConnectionFailed(self._host, self._port, e) from e

            # Reads block until a line or end-of-stream arrives
            sock.settimeout(None)
            self._socket = sock
            self._writer = sock.makefile("wb")
            self._reader = sock.makefile("rb")
            self._state = ConnectionState.OPEN

        logger.info("Connected to %s:%d", self._host, self._port)

    def close(self) -> None:
        """Release the read stream, write stream and socket. Idempotent."""
        with self._lifecycle:
            if self._state is ConnectionState.CLOSED:
                return
            was_open = self._state is ConnectionState.OPEN
            self._state = ConnectionState.CLOSED
            if not was_open:
                return

            # Wakes any reader blocked in another thread
            try:
                self._socket.shutdown(socket.SHUT_RDWR)
            except OSError as e:
                logger.debug("Socket shutdown: %s", e)

            for name, resource in (
                ("reader", self._reader),
                ("writer", self._writer),
                ("socket", self._socket),
            ):
                try:
                    resource.close()
                except Exception as e:
                    logger.warning("Error closing %s: %s", name, e)

        logger.info("Disconnected from %s:%d", self._host, self._port)

    @contextmanager
    def _exclusive(self) -> Iterator[bool]:
        """Hold the gate for one wire operation.

        Yields whether the stream is usable. I/O errors caused by a
        concurrent or earlier ``close`` are suppressed; any other I/O
        error propagates.
        """
        with self._gate:
            if self._state is ConnectionState.UNOPENED:
                raise NotConnected("Connection has not been opened")
            try:
                yield self._state is ConnectionState.OPEN
            except (OSError, ValueError) as e:
                if self._state is not ConnectionState.CLOSED:
                    raise
                logger.debug("Stream closed during I/O: %s", e)

    def _encode(self, command: str, arguments: Iterable[Any]) -> bytes:
        line = build_line(command, arguments)
        if not command.startswith(QUIET_PREFIX):
            logger.debug("Sending: %s", line.decode("ascii").rstrip("\n"))
        return line

    def _write(self, line: bytes) -> None:
        self._writer.write(line)
        self._writer.flush()

    def _read_line(self) -> str | None:
        response = parse_line(self._reader.readline())
        if response:
            logger.debug("Received: %s", response)
        return response

    def send(self, command: str, arguments: Iterable[Any] = ()) -> None:
        """Write one command line without waiting for a reply.

        Args:
            command: Dotted command name, e.g. ``chat.post``.
            arguments: Ordered argument values; nested iterables are
                flattened inline.
        """
        line = self._encode(command, arguments)
        with self._exclusive() as usable:
            if usable:
                self._write(line)

    def receive(self) -> str | None:
        """Read one reply line.

        Returns:
            The line without its terminator, or ``None`` if the peer
            closed the stream or this connection is closed.
        """
        with self._exclusive() as usable:
            if usable:
                return self._read_line()
        return None

    def send_and_receive(
        self, command: str, arguments: Iterable[Any] = ()
    ) -> str | None:
        """Write one command line and read its reply as one atomic step.

        No other caller's send or receive can run between the write and
        the read, which is what pairs the reply with this request.
        """
        line = self._encode(command, arguments)
        with self._exclusive() as usable:
            if usable:
                self._write(line)
                return self._read_line()
        return None
