"""Command names and request builders for the scripting API.

Each builder validates its arguments and returns a :class:`Request`
which the connection turns into one wire line.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..models.vec3 import Vec3
from .framing import build_line, flatten


class Command(str, Enum):
    """Scripting API command names."""

    CHAT_POST = "chat.post"
    WORLD_GET_BLOCK = "world.getBlock"
    WORLD_GET_BLOCK_WITH_DATA = "world.getBlockWithData"
    WORLD_SET_BLOCK = "world.setBlock"
    WORLD_SET_BLOCKS = "world.setBlocks"
    WORLD_GET_HEIGHT = "world.getHeight"
    WORLD_GET_PLAYER_IDS = "world.getPlayerEntityIds"
    WORLD_CHECKPOINT_SAVE = "world.checkpoint.save"
    WORLD_CHECKPOINT_RESTORE = "world.checkpoint.restore"
    WORLD_SETTING = "world.setting"
    PLAYER_GET_TILE = "player.getTile"
    PLAYER_SET_TILE = "player.setTile"
    PLAYER_GET_POS = "player.getPos"
    PLAYER_SET_POS = "player.setPos"
    CAMERA_MODE_NORMAL = "camera.mode.setNormal"
    CAMERA_MODE_FIXED = "camera.mode.setFixed"
    CAMERA_MODE_FOLLOW = "camera.mode.setFollow"
    EVENTS_CLEAR = "events.clear"
    EVENTS_BLOCK_HITS = "events.block.hits"
    EVENTS_CHAT_POSTS = "events.chat.posts"


# Settings accepted by world.setting
WORLD_SETTINGS = ("world_immutable", "nametags_visible")


@dataclass
class Request:
    """A command plus its ordered arguments."""

    command: str
    arguments: tuple[Any, ...] = field(default_factory=tuple)

    def encode(self) -> bytes:
        return build_line(self.command, self.arguments)


def build_request(command: Command | str, *arguments: Any) -> Request:
    """Build a request for an arbitrary command name.

    Raises:
        ValueError: If the name or any argument would break the request
            across more than one line.
    """
    name = command.value if isinstance(command, Command) else command
    if not name or "(" in name or "\n" in name or "\r" in name:
        raise ValueError(f"Invalid command name {name!r}")
    text = flatten(arguments)
    if "\n" in text or "\r" in text:
        raise ValueError("Arguments must not contain line breaks")
    return Request(name, arguments)


def _check_byte(label: str, value: int) -> None:
    if not 0 <= value <= 255:
        raise ValueError(f"{label} must be 0-255, got {value}")


def build_post_chat(message: str) -> Request:
    """Build a chat.post request.

    Line terminators are replaced with spaces so the message cannot
    split into a second command.
    """
    message = message.replace("\r", " ").replace("\n", " ")
    return build_request(Command.CHAT_POST, message)


def build_get_block(position: Vec3) -> Request:
    return build_request(Command.WORLD_GET_BLOCK, position.floor())


def build_get_block_with_data(position: Vec3) -> Request:
    return build_request(Command.WORLD_GET_BLOCK_WITH_DATA, position.floor())


def build_set_block(position: Vec3, block_id: int, data: int | None = None) -> Request:
    """Build a world.setBlock request.

    Args:
        position: Target tile.
        block_id: Block type id 0-255.
        data: Optional block data value 0-255 (wool colour, orientation...).
    """
    _check_byte("Block id", block_id)
    if data is None:
        return build_request(Command.WORLD_SET_BLOCK, position.floor(), block_id)
    _check_byte("Block data", data)
    return build_request(Command.WORLD_SET_BLOCK, position.floor(), block_id, data)


def build_set_blocks(
    start: Vec3, end: Vec3, block_id: int, data: int | None = None
) -> Request:
    """Build a world.setBlocks request filling the cuboid between two corners."""
    _check_byte("Block id", block_id)
    args: list[Any] = [start.floor(), end.floor(), block_id]
    if data is not None:
        _check_byte("Block data", data)
        args.append(data)
    return build_request(Command.WORLD_SET_BLOCKS, *args)


def build_get_height(x: int, z: int) -> Request:
    return build_request(Command.WORLD_GET_HEIGHT, math.floor(x), math.floor(z))


def build_get_player_ids() -> Request:
    return build_request(Command.WORLD_GET_PLAYER_IDS)


def build_checkpoint_save() -> Request:
    return build_request(Command.WORLD_CHECKPOINT_SAVE)


def build_checkpoint_restore() -> Request:
    return build_request(Command.WORLD_CHECKPOINT_RESTORE)


def build_world_setting(setting: str, enabled: bool) -> Request:
    """Build a world.setting request.

    Args:
        setting: One of ``world_immutable`` or ``nametags_visible``.
        enabled: New value, sent as 1 or 0.
    """
    if setting not in WORLD_SETTINGS:
        raise ValueError(
            f"Unknown world setting '{setting}'. Valid: {list(WORLD_SETTINGS)}"
        )
    return build_request(Command.WORLD_SETTING, setting, 1 if enabled else 0)


def build_get_player_tile() -> Request:
    return build_request(Command.PLAYER_GET_TILE)


def build_set_player_tile(position: Vec3) -> Request:
    return build_request(Command.PLAYER_SET_TILE, position.floor())


def build_get_player_pos() -> Request:
    return build_request(Command.PLAYER_GET_POS)


def build_set_player_pos(position: Vec3) -> Request:
    return build_request(Command.PLAYER_SET_POS, position)


def build_camera_normal(entity_id: int | None = None) -> Request:
    """Build a camera.mode.setNormal request, optionally for one entity."""
    if entity_id is None:
        return build_request(Command.CAMERA_MODE_NORMAL)
    return build_request(Command.CAMERA_MODE_NORMAL, entity_id)


def build_camera_fixed() -> Request:
    return build_request(Command.CAMERA_MODE_FIXED)


def build_camera_follow(entity_id: int | None = None) -> Request:
    if entity_id is None:
        return build_request(Command.CAMERA_MODE_FOLLOW)
    return build_request(Command.CAMERA_MODE_FOLLOW, entity_id)


def build_events_clear() -> Request:
    return build_request(Command.EVENTS_CLEAR)


def build_poll_block_hits() -> Request:
    return build_request(Command.EVENTS_BLOCK_HITS)


def build_poll_chat_posts() -> Request:
    return build_request(Command.EVENTS_CHAT_POSTS)
