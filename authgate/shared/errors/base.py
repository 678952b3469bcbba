# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus
from typing import Any, cast


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "validation_error"
    INVALID_METHOD = "invalid_method"
    INVALID_EMAIL = "invalid_email"
    INVALID_TOKEN_ENCODING = "invalid_token_encoding"
    DUPLICATE_KEY = "duplicate_key"
    BAD_CREDENTIALS = "bad_credentials"
    INVALID_TOKEN = "invalid_token"
    INTERNAL_ERROR = "internal_error"


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        """Client-facing body; context is only rendered for client errors."""
        payload: dict[str, Any] = {"error": self.code}
        if self.context and self.status < HTTPStatus.INTERNAL_SERVER_ERROR:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    def __init__(
        self,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_code = code or cast(str, getattr(self, "code", "domain_error"))
        resolved_status = status or cast(
            HTTPStatus, getattr(self, "status", HTTPStatus.BAD_REQUEST)
        )
        super().__init__(code=resolved_code, status=resolved_status, context=context)


class InfrastructureError(AppError):
    """Failure of a collaborator outside the process (store, OS)."""

    def __init__(
        self,
        code: str = ErrorCode.INTERNAL_ERROR.value,
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(code=code, status=HTTPStatus.INTERNAL_SERVER_ERROR, context=context)


class ValidationError(AppError):
    def __init__(
        self,
        code: str = ErrorCode.VALIDATION_ERROR.value,
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.BAD_REQUEST,
            context=context,
        )


class InternalError(InfrastructureError):
    """Store, transaction or random-source failure.

    ``operation`` names the failing step. It is kept on the exception for
    server-side diagnostics and never rendered to clients.
    """

    def __init__(self, operation: str) -> None:
        super().__init__(code=ErrorCode.INTERNAL_ERROR.value)
        self.operation = operation

    def __str__(self) -> str:
        cause = self.__cause__
        if cause is not None:
            return f"{self.operation}: {cause}"
        return self.operation
