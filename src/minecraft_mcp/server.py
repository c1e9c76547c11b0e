"""MCP server entry point for a Minecraft scripting API endpoint.

Exposes tools, resources, and prompts via the Model Context Protocol
using the official Python MCP SDK with stdio transport. All tools share
one :class:`LineProtocolConnection`.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from mcp.server.fastmcp import FastMCP

from .models.blocks import Block, block_name
from .models.vec3 import Vec3
from .protocol.commands import (
    Request,
    build_camera_fixed,
    build_camera_follow,
    build_camera_normal,
    build_checkpoint_restore,
    build_checkpoint_save,
    build_events_clear,
    build_get_block_with_data,
    build_get_height,
    build_get_player_ids,
    build_get_player_pos,
    build_get_player_tile,
    build_poll_block_hits,
    build_poll_chat_posts,
    build_post_chat,
    build_request,
    build_set_block,
    build_set_blocks,
    build_set_player_pos,
    build_world_setting,
)
from .protocol.parser import (
    ResponseError,
    parse_block_hits,
    parse_block_with_data,
    parse_chat_posts,
    parse_entity_ids,
    parse_int,
    parse_vec3,
)
from .transport.tcp_connection import DEFAULT_HOST, DEFAULT_PORT, LineProtocolConnection

logger = logging.getLogger(__name__)

HOST_ENV = "MINECRAFT_HOST"
PORT_ENV = "MINECRAFT_PORT"

# Largest cuboid edge accepted by set_blocks
MAX_FILL_EDGE = 128

mcp = FastMCP(
    "minecraft",
    instructions="MCP server for a Minecraft world exposing the scripting API on port 4711",
)

# Global connection state
_connection: LineProtocolConnection | None = None


def _get_connection() -> LineProtocolConnection:
    """Get the active game connection, raising if not connected."""
    if _connection is None or not _connection.connected:
        raise RuntimeError(
            "Not connected to Minecraft. Use the 'connect' tool first."
        )
    return _connection


def _resolve_target(host: str | None, port: int | None) -> tuple[str, int]:
    """Tool argument, then environment, then the protocol default."""
    if host is None:
        host = os.environ.get(HOST_ENV, DEFAULT_HOST)
    if port is None:
        port = int(os.environ.get(PORT_ENV, DEFAULT_PORT))
    return host, port


def _send(request: Request) -> None:
    _get_connection().send(request.command, request.arguments)


def _call(request: Request) -> str | None:
    return _get_connection().send_and_receive(request.command, request.arguments)


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(host: str | None = None, port: int | None = None) -> dict[str, Any]:
    """Open a connection to a running Minecraft game.

    Args:
        host: Game host. Defaults to $MINECRAFT_HOST, then localhost.
        port: Scripting API port. Defaults to $MINECRAFT_PORT, then 4711.
    """
    global _connection
    if _connection is not None and _connection.connected:
        return {
            "connected": True,
            "message": "Already connected",
            "host": _connection.host,
            "port": _connection.port,
        }

    try:
        host, port = _resolve_target(host, port)
    except ValueError:
        return {"error": f"${PORT_ENV} must be a port number"}
    connection = LineProtocolConnection(host, port)
    connection.open()
    _connection = connection

    result: dict[str, Any] = {"connected": True, "host": host, "port": port}
    try:
        result["player_ids"] = parse_entity_ids(_call(build_get_player_ids()))
    except ResponseError as e:
        logger.debug("Player id query failed: %s", e)
    return result


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the connection to the game."""
    global _connection
    if _connection is None:
        return {"disconnected": True}
    _connection.close()
    _connection = None
    return {"disconnected": True}


# ─── WORLD TOOLS ─────────────────────────────────────────────────────

@mcp.tool()
def post_chat(message: str) -> dict[str, Any]:
    """Post a message to the in-game chat.

    Args:
        message: Text to post. Line breaks are sent as spaces.
    """
    if not message:
        return {"error": "Message must not be empty"}
    _send(build_post_chat(message))
    return {"posted": True}


@mcp.tool()
def get_block(x: int, y: int, z: int) -> dict[str, Any]:
    """Read the block type and data value at a position."""
    block_id, data = parse_block_with_data(
        _call(build_get_block_with_data(Vec3(x, y, z)))
    )
    return {
        "position": {"x": x, "y": y, "z": z},
        "id": block_id,
        "name": block_name(block_id),
        "data": data,
    }


@mcp.tool()
def set_block(x: int, y: int, z: int, block_id: int, data: int | None = None) -> dict[str, Any]:
    """Place a single block.

    Args:
        x, y, z: Target tile.
        block_id: Block type id (0-255); see the block catalog resource.
        data: Optional data value (0-255), e.g. wool colour.
    """
    try:
        request = build_set_block(Vec3(x, y, z), block_id, data)
    except ValueError as e:
        return {"error": str(e)}
    _send(request)
    return {"placed": True, "id": block_id, "name": block_name(block_id)}


@mcp.tool()
def set_blocks(
    x1: int, y1: int, z1: int,
    x2: int, y2: int, z2: int,
    block_id: int,
    data: int | None = None,
) -> dict[str, Any]:
    """Fill the cuboid between two corners with one block type.

    Each edge is limited to 128 blocks.
    """
    start, end = Vec3(x1, y1, z1), Vec3(x2, y2, z2)
    size = [abs(a - b) + 1 for a, b in zip(start, end)]
    if max(size) > MAX_FILL_EDGE:
        return {"error": f"Each edge must be at most {MAX_FILL_EDGE} blocks"}
    try:
        request = build_set_blocks(start, end, block_id, data)
    except ValueError as e:
        return {"error": str(e)}
    _send(request)
    return {
        "filled": True,
        "count": size[0] * size[1] * size[2],
        "name": block_name(block_id),
    }


@mcp.tool()
def get_height(x: int, z: int) -> dict[str, Any]:
    """Y coordinate of the highest non-air block in a column."""
    height = parse_int(_call(build_get_height(x, z)))
    return {"x": x, "z": z, "height": height}


@mcp.tool()
def save_checkpoint() -> dict[str, bool]:
    """Save a checkpoint of the world that restore_checkpoint can return to."""
    _send(build_checkpoint_save())
    return {"saved": True}


@mcp.tool()
def restore_checkpoint() -> dict[str, bool]:
    """Restore the world to the last saved checkpoint."""
    _send(build_checkpoint_restore())
    return {"restored": True}


@mcp.tool()
def change_world_setting(setting: str, enabled: bool) -> dict[str, Any]:
    """Toggle a world setting.

    Args:
        setting: "world_immutable" or "nametags_visible".
        enabled: New value.
    """
    try:
        request = build_world_setting(setting, enabled)
    except ValueError as e:
        return {"error": str(e)}
    _send(request)
    return {"setting": setting, "enabled": enabled}


# ─── PLAYER TOOLS ────────────────────────────────────────────────────

@mcp.tool()
def get_player_position() -> dict[str, Any]:
    """Exact position of the host player."""
    return parse_vec3(_call(build_get_player_pos())).to_dict()


@mcp.tool()
def set_player_position(x: float, y: float, z: float) -> dict[str, Any]:
    """Move the host player to an exact position."""
    position = Vec3(x, y, z)
    _send(build_set_player_pos(position))
    return {"moved": True, "position": position.to_dict()}


@mcp.tool()
def get_player_tile() -> dict[str, Any]:
    """Tile the host player is standing on."""
    return parse_vec3(_call(build_get_player_tile())).to_dict()


@mcp.tool()
def get_player_ids() -> dict[str, Any]:
    """Entity ids of all connected players."""
    return {"player_ids": parse_entity_ids(_call(build_get_player_ids()))}


@mcp.tool()
def set_camera(mode: str, entity_id: int | None = None) -> dict[str, Any]:
    """Change the camera mode.

    Args:
        mode: "normal", "fixed" or "follow".
        entity_id: Entity to attach to for normal and follow modes.
    """
    if mode == "normal":
        request = build_camera_normal(entity_id)
    elif mode == "follow":
        request = build_camera_follow(entity_id)
    elif mode == "fixed":
        request = build_camera_fixed()
    else:
        return {"error": f"Unknown camera mode '{mode}'"}
    _send(request)
    return {"mode": mode}


# ─── EVENT TOOLS ─────────────────────────────────────────────────────

@mcp.tool()
def poll_block_hits() -> dict[str, Any]:
    """Return and drain block hits (sword right-clicks) since the last poll."""
    hits = parse_block_hits(_call(build_poll_block_hits()))
    return {"hits": [hit.to_dict() for hit in hits]}


@mcp.tool()
def poll_chat_posts() -> dict[str, Any]:
    """Return and drain chat messages posted since the last poll."""
    posts = parse_chat_posts(_call(build_poll_chat_posts()))
    return {"posts": [post.to_dict() for post in posts]}


@mcp.tool()
def clear_events() -> dict[str, bool]:
    """Discard all pending events."""
    _send(build_events_clear())
    return {"cleared": True}


# ─── RAW ACCESS ──────────────────────────────────────────────────────

@mcp.tool()
def send_command(
    command: str,
    arguments: list[Any] | None = None,
    expect_response: bool = False,
) -> dict[str, Any]:
    """Send any scripting API command.

    Args:
        command: Dotted command name, e.g. "world.getBlock".
        arguments: Argument values, sent comma-separated without quoting.
        expect_response: Wait for and return the game's reply line.
    """
    try:
        request = build_request(command, *(arguments or []))
    except ValueError as e:
        return {"error": str(e)}

    if not expect_response:
        _send(request)
        return {"sent": True}
    return {"sent": True, "response": _call(request)}


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("minecraft://catalog/blocks")
def resource_block_catalog() -> str:
    """List of known block type names with IDs."""
    blocks = [{"id": b.value, "name": b.name.lower()} for b in Block]
    return json.dumps({"blocks": blocks, "count": len(blocks)})


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def build_structure(description: str) -> str:
    """Guide the AI to build a structure next to the player.

    Args:
        description: What to build, e.g. "a small stone house with a door".
    """
    return f"""Build {description} near the player.
Steps:
- Use get_player_tile to find where the player is standing
- Use get_height to find the ground level at the build site
- Use save_checkpoint before placing anything so the build can be undone
- Use set_blocks for walls, floors and roofs, set_block for details
- Use post_chat to tell the player when the build is finished

Block ids are listed in the minecraft://catalog/blocks resource."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
