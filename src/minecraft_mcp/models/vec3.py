"""Three-component vector used for positions and tile coordinates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class Vec3:
    """A world position. Integer components address a block tile."""

    x: float = 0
    y: float = 0
    z: float = 0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def floor(self) -> Vec3:
        """Return the tile containing this position."""
        return Vec3(math.floor(self.x), math.floor(self.y), math.floor(self.z))

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "z": self.z}
