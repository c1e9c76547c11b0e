"""Response parsing for scripting API replies.

Replies are single lines. Multi-value replies separate fields with
commas and records with ``|``.
"""

from __future__ import annotations

from ..models.events import BlockHit, ChatPost
from ..models.vec3 import Vec3

FAIL_RESPONSE = "Fail"
RECORD_SEPARATOR = "|"


class ResponseError(ValueError):
    """The game sent no reply, a failure marker, or malformed text."""


def _require(response: str | None) -> str:
    if response is None:
        raise ResponseError("No response from game")
    text = response.rstrip("\r\n")
    if text.strip() == FAIL_RESPONSE:
        raise ResponseError("Game reported command failure")
    return text


def _number(text: str) -> int | float:
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        return float(text)


def parse_int(response: str | None) -> int:
    """Parse a single integer reply such as a block id or height."""
    text = _require(response)
    try:
        return int(text)
    except ValueError as e:
        raise ResponseError(f"Expected an integer, got {text!r}") from e


def parse_vec3(response: str | None) -> Vec3:
    """Parse an ``x,y,z`` reply. Components keep their int/float type."""
    text = _require(response)
    parts = text.split(",")
    if len(parts) != 3:
        raise ResponseError(f"Expected 3 components, got {text!r}")
    try:
        return Vec3(*(_number(p) for p in parts))
    except ValueError as e:
        raise ResponseError(f"Malformed vector {text!r}") from e


def parse_block_with_data(response: str | None) -> tuple[int, int]:
    """Parse an ``id,data`` reply."""
    text = _require(response)
    parts = text.split(",")
    if len(parts) != 2:
        raise ResponseError(f"Expected id,data, got {text!r}")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError as e:
        raise ResponseError(f"Malformed block data {text!r}") from e


def _records(response: str | None) -> list[str]:
    text = _require(response)
    if not text:
        return []
    return text.split(RECORD_SEPARATOR)


def parse_entity_ids(response: str | None) -> list[int]:
    """Parse a ``|``-separated list of entity ids."""
    try:
        return [int(r) for r in _records(response)]
    except ValueError as e:
        raise ResponseError(f"Malformed entity id list {response!r}") from e


def parse_block_hits(response: str | None) -> list[BlockHit]:
    """Parse ``x,y,z,face,entityId`` records."""
    hits = []
    for record in _records(response):
        parts = record.split(",")
        if len(parts) != 5:
            raise ResponseError(f"Malformed block hit {record!r}")
        try:
            x, y, z, face, entity_id = (int(p) for p in parts)
        except ValueError as e:
            raise ResponseError(f"Malformed block hit {record!r}") from e
        hits.append(BlockHit(position=Vec3(x, y, z), face=face, entity_id=entity_id))
    return hits


def parse_chat_posts(response: str | None) -> list[ChatPost]:
    """Parse ``entityId,message`` records.

    Only the first comma separates fields; the message keeps any others.
    """
    posts = []
    for record in _records(response):
        entity, sep, message = record.partition(",")
        if not sep:
            raise ResponseError(f"Malformed chat post {record!r}")
        try:
            posts.append(ChatPost(entity_id=int(entity), message=message))
        except ValueError as e:
            raise ResponseError(f"Malformed chat post {record!r}") from e
    return posts
