"""Event records returned by the game's event polling commands."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from .vec3 import Vec3


class BlockFace(IntEnum):
    """Face of a block that was hit, as reported by the game."""

    BOTTOM = 0
    TOP = 1
    NORTH = 2
    SOUTH = 3
    WEST = 4
    EAST = 5


@dataclass
class BlockHit:
    """A player struck a block with a sword."""

    position: Vec3
    face: int
    entity_id: int

    def to_dict(self) -> dict:
        try:
            face = BlockFace(self.face).name.lower()
        except ValueError:
            face = str(self.face)
        return {
            "position": self.position.to_dict(),
            "face": face,
            "entity_id": self.entity_id,
        }


@dataclass
class ChatPost:
    """A chat message posted by a player."""

    entity_id: int
    message: str

    def to_dict(self) -> dict:
        return {"entity_id": self.entity_id, "message": self.message}
