# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from authgate.shared.errors import ErrorCode, ValidationError

TOKEN_SIZE = 16

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_MILLISECOND = timedelta(milliseconds=1)


def to_millis(moment: datetime) -> int:
    """Epoch milliseconds for ``moment``; naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return (moment - _EPOCH) // _MILLISECOND


def from_millis(millis: int) -> datetime:
    return _EPOCH + timedelta(milliseconds=millis)


@dataclass(slots=True, frozen=True)
class Token:
    """Bearer credential: 16 random bytes, text form is standard base64."""

    value: bytes

    def __post_init__(self) -> None:
        if len(self.value) != TOKEN_SIZE:
            raise ValidationError(
                ErrorCode.INVALID_TOKEN_ENCODING.value,
                context={"expected_bytes": TOKEN_SIZE, "actual_bytes": len(self.value)},
            )

    def __str__(self) -> str:
        return base64.b64encode(self.value).decode("ascii")

    def __repr__(self) -> str:
        return "Token(<redacted>)"

    @classmethod
    def parse(cls, text: str) -> Token:
        try:
            raw = base64.b64decode(text.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError) as exc:
            raise ValidationError(ErrorCode.INVALID_TOKEN_ENCODING.value) from exc
        return cls(raw)


@dataclass(slots=True, frozen=True)
class SessionToken:

    user_id: str
    token: Token
    starts_at: datetime
    expires_at: datetime
