"""Tests for request line framing and response line decoding."""

from minecraft_mcp.models.blocks import Block
from minecraft_mcp.models.vec3 import Vec3
from minecraft_mcp.protocol.commands import Command
from minecraft_mcp.protocol.framing import build_line, flatten, parse_line


def test_build_line_no_arguments():
    """Commands without arguments keep empty parentheses."""
    assert build_line("events.clear") == b"events.clear()\n"


def test_build_line_scalars():
    """Numbers and strings use their plain text form."""
    assert build_line("world.getBlock", [0, -5, 12]) == b"world.getBlock(0,-5,12)\n"
    assert build_line("chat.post", ["hello world"]) == b"chat.post(hello world)\n"


def test_build_line_floats_unformatted():
    assert build_line("player.setPos", [1.5, 64, -0.25]) == b"player.setPos(1.5,64,-0.25)\n"


def test_flatten_nested_sequence():
    """Nested sequences expand inline with no brackets."""
    assert build_line("cmd", ["a", [1, 2]]) == b"cmd(a,1,2)\n"
    assert flatten([1, [2, [3, (4, 5)]], 6]) == "1,2,3,4,5,6"


def test_flatten_no_escaping():
    """Commas inside strings are not quoted."""
    assert flatten(["a,b", "c"]) == "a,b,c"


def test_flatten_vec3_and_enum():
    """Vec3 expands to three values, enum members to their value."""
    assert flatten([Vec3(1, 2, 3), Block.STONE]) == "1,2,3,1"


def test_flatten_bool():
    assert flatten([True, False]) == "True,False"


def test_build_line_non_ascii_replaced():
    """Characters outside ASCII are sent as '?'."""
    assert build_line("chat.post", ["café"]) == b"chat.post(caf?)\n"


def test_parse_line_strips_terminator():
    assert parse_line(b"42\n") == "42"
    assert parse_line(b"1,2,3\r\n") == "1,2,3"


def test_parse_line_without_terminator():
    """A final line cut short by end-of-stream is still returned."""
    assert parse_line(b"partial") == "partial"


def test_parse_line_empty_read_is_none():
    assert parse_line(b"") is None


def test_parse_line_blank_line():
    """A blank reply is an empty string, not end-of-stream."""
    assert parse_line(b"\n") == ""


def test_build_line_enum_command():
    """Command enum members are sent by name value, not repr."""
    assert build_line(Command.EVENTS_CLEAR) == b"events.clear()\n"
    assert build_line(Command.WORLD_GET_BLOCK, [0, 1, 2]) == b"world.getBlock(0,1,2)\n"
