from __future__ import annotations

import base64
import secrets

import pytest

from authgate.domain.users.entities import TOKEN_SIZE, Token, from_millis, to_millis
from authgate.shared.errors import ErrorCode, ValidationError


def test_text_encoding_round_trips() -> None:
    raw = secrets.token_bytes(TOKEN_SIZE)
    token = Token(raw)

    text = str(token)

    assert text == base64.b64encode(raw).decode()
    assert Token.parse(text).value == raw
    assert Token.parse(text) == token


@pytest.mark.parametrize("size", [0, 1, 15, 17, 32])
def test_parse_rejects_other_lengths(size: int) -> None:
    text = base64.b64encode(b"\x01" * size).decode()

    with pytest.raises(ValidationError) as info:
        Token.parse(text)

    assert info.value.code == ErrorCode.INVALID_TOKEN_ENCODING.value


@pytest.mark.parametrize("text", ["not base64!!", "AAAA AAAA", "é" * 24, "abc"])
def test_parse_rejects_malformed_text(text: str) -> None:
    with pytest.raises(ValidationError):
        Token.parse(text)


def test_repr_hides_value() -> None:
    token = Token(b"\xff" * TOKEN_SIZE)
    assert str(token) not in repr(token)


def test_millis_conversion_is_exact() -> None:
    moment = from_millis(1_700_000_000_123)
    assert to_millis(moment) == 1_700_000_000_123
    assert to_millis(from_millis(0)) == 0
