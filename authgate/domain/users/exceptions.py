# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from authgate.shared.errors import DomainError, ErrorCode


class DuplicateKeyError(DomainError):
    code = ErrorCode.DUPLICATE_KEY.value


class BadCredentialsError(DomainError):
    """Unknown identifier or wrong password; the two are never distinguished."""

    code = ErrorCode.BAD_CREDENTIALS.value
    status = HTTPStatus.UNAUTHORIZED


class InvalidTokenError(DomainError):
    """Unknown, malformed or expired token."""

    code = ErrorCode.INVALID_TOKEN.value
    status = HTTPStatus.UNAUTHORIZED
