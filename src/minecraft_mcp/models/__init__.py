"""Data models for positions, blocks, and game events."""

from .vec3 import Vec3
from .blocks import Block, block_name
from .events import BlockFace, BlockHit, ChatPost
