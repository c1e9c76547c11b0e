"""Line framing for the scripting API wire protocol.

Every request is a single ASCII line::

    command(arg1,arg2,...)\\n

Arguments are flattened into one comma-separated list. No quoting or
escaping is applied, so an argument containing a comma simply becomes
several arguments on the server side. Responses are one line of text
whose meaning is defined by the game.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any

LINE_TERMINATOR = b"\n"
ENCODING = "ascii"


def flatten(arguments: Iterable[Any]) -> str:
    """Join arguments with commas, expanding nested iterables inline.

    Strings and bytes are treated as scalars. Enum members contribute
    their value, so ``Block.STONE`` is sent as ``1``.
    """
    return ",".join(_flatten_values(arguments))


def _flatten_values(arguments: Iterable[Any]) -> list[str]:
    values: list[str] = []
    for arg in arguments:
        if isinstance(arg, Enum):
            arg = arg.value
        if isinstance(arg, bytes):
            values.append(arg.decode(ENCODING, errors="replace"))
        elif isinstance(arg, str):
            values.append(arg)
        elif isinstance(arg, Iterable):
            values.extend(_flatten_values(arg))
        else:
            values.append(str(arg))
    return values


def build_line(command: str, arguments: Iterable[Any] = ()) -> bytes:
    """Build the encoded request line for a command.

    Args:
        command: Dotted command name, e.g. ``world.getBlock``.
        arguments: Ordered argument values, possibly nested.

    Returns:
        ASCII bytes terminated by ``\\n``. Characters outside ASCII are
        replaced with ``?``.
    """
    if isinstance(command, Enum):
        command = command.value
    text = f"{command}({flatten(arguments)})"
    return text.encode(ENCODING, errors="replace") + LINE_TERMINATOR


def parse_line(data: bytes) -> str | None:
    """Decode one received line, stripping its terminator.

    Returns ``None`` for an empty read, which is how a line reader
    signals that the peer closed the stream.
    """
    if not data:
        return None
    text = data.decode(ENCODING, errors="replace")
    if text.endswith("\n"):
        text = text[:-1]
    if text.endswith("\r"):
        text = text[:-1]
    return text
