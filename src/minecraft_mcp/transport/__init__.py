"""Transport layer: TCP line connection to the game."""

from .tcp_connection import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    AlreadyOpen,
    ConnectionFailed,
    ConnectionState,
    LineProtocolConnection,
    NotConnected,
)
