# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Scrub credentials out of log messages before they reach a sink."""

from __future__ import annotations

import re
from typing import Any

REDACTED = "***REDACTED***"

# (pattern, replacement); applied in order
_RULES: list[tuple[re.Pattern[str], str]] = [
    # auth_token=<base64> in cookies, Set-Cookie lines and kwargs dumps
    (
        re.compile(r"(auth[_-]?token\s*[:=]\s*['\"]?)[A-Za-z0-9+/_\-]{16,}={0,2}", re.IGNORECASE),
        rf"\1{REDACTED}",
    ),
    (re.compile(r"(bearer\s+)[A-Za-z0-9+/_\-.]{16,}={0,2}", re.IGNORECASE), rf"\1{REDACTED}"),
    # password=..., passwd: ..., 'password': '...'
    (
        re.compile(r"((?:password|passwd)['\"]?\s*[:=]\s*['\"]?)[^'\"\s,&}]+", re.IGNORECASE),
        rf"\1{REDACTED}",
    ),
    # credentials embedded in DATABASE_URL
    (
        re.compile(r"\b([a-z][a-z0-9+]*://[^:/@\s]+):[^@\s]+@", re.IGNORECASE),
        rf"\1:{REDACTED}@",
    ),
    # emails keep their domain only
    (re.compile(r"[A-Za-z0-9._%+-]+@([A-Za-z0-9.-]+\.[A-Za-z]{2,})"), r"***@\1"),
    # whole header values
    (
        re.compile(r"((?:authorization|cookie|set-cookie)\s*:\s*)[^\n]{8,}", re.IGNORECASE),
        rf"\1{REDACTED}",
    ),
]


def sanitize_message(message: str) -> str:
    for pattern, replacement in _RULES:
        message = pattern.sub(replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> None:
    """loguru patcher: scrub the message before any sink formats it."""
    message = record.get("message")
    if message:
        record["message"] = sanitize_message(message)


__all__ = ["REDACTED", "sanitize_message", "sanitize_record"]
