"""
Position tokens for stores without native cursors.

The SQL and in-memory stores paginate by key set: a cursor is the
(title, id) pair of the last entity returned, and the next page starts
strictly after it. The pair is serialized as a compact JSON array and
encoded as unpadded URL-safe base64, so the token looks and behaves
like a Datastore cursor to callers.
"""

from __future__ import annotations

from typing import Any, NamedTuple

import base64
import binascii
import json

from .errors import MalformedCursorError


class Position(NamedTuple):
    """Sort position of an entity: the ordering value, then the id."""

    value: str
    id: int


def encode_position(position: Position) -> str:
    """Return a URL-safe token for a sort position"""
    raw = json.dumps([position.value, position.id], separators=(",", ":"))
    return base64.urlsafe_b64encode(raw.encode("utf-8")).rstrip(b"=").decode("ascii")


def decode_position(token: str) -> Position:
    """Decode a token created by encode_position()"""
    try:
        padded = token + "=" * (-len(token) % 4)
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        decoded: Any = json.loads(raw.decode("utf-8"))
    except (ValueError, binascii.Error) as e:
        # UnicodeError and JSONDecodeError are both ValueErrors
        raise MalformedCursorError(token, str(e)) from e
    if (
        not isinstance(decoded, list)
        or len(decoded) != 2
        or not isinstance(decoded[0], str)
        or not isinstance(decoded[1], int)
        or isinstance(decoded[1], bool)
    ):
        raise MalformedCursorError(token, "not a position")
    return Position(decoded[0], decoded[1])
