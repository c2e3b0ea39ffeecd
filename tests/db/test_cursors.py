"""
Tests for the position tokens used by the SQL and in-memory stores.
"""

from __future__ import annotations

import base64

import pytest

from bookshelf.db.cursors import Position, decode_position, encode_position
from bookshelf.db.errors import MalformedCursorError


def _b64(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


class TestPositionTokens:
    def test_round_trip(self) -> None:
        position = Position("Anna Karenina", 17)
        assert decode_position(encode_position(position)) == position

    def test_token_is_url_safe(self) -> None:
        # Non-ASCII titles and characters that base64 maps to + and /
        token = encode_position(Position("Þórbergur ??>>~~ Ævisaga", 2**40))

        assert "+" not in token
        assert "/" not in token
        assert "=" not in token
        assert token.isascii()

    def test_padding_is_optional(self) -> None:
        token = encode_position(Position("x", 1))
        padded = token + "=" * (-len(token) % 4)
        assert decode_position(padded) == Position("x", 1)

    @pytest.mark.parametrize(
        "token",
        [
            "not a cursor!",
            "%%%%",
            "a",
            _b64(b"\xff\xfe\xfd"),
            _b64(b"{not json"),
            _b64(b'{"title": "x", "id": 1}'),
            _b64(b'["x"]'),
            _b64(b'["x", "1"]'),
            _b64(b"[1, 2]"),
            _b64(b'["x", true]'),
            _b64(b'["x", 1, 2]'),
        ],
    )
    def test_malformed_tokens(self, token: str) -> None:
        with pytest.raises(MalformedCursorError) as excinfo:
            decode_position(token)
        assert excinfo.value.token == token

    def test_malformed_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            decode_position("%%%%")
