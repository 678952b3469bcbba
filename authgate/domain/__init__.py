# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .users.entities import TOKEN_SIZE, SessionToken, Token, from_millis, to_millis
from .users.exceptions import BadCredentialsError, DuplicateKeyError, InvalidTokenError

__all__ = [
    "TOKEN_SIZE",
    "BadCredentialsError",
    "DuplicateKeyError",
    "InvalidTokenError",
    "SessionToken",
    "Token",
    "from_millis",
    "to_millis",
]
