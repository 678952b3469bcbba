# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, Protocol
from urllib.parse import urlencode

from flask import redirect, request
from werkzeug.wrappers import Response

from authgate.domain.users.entities import Token
from authgate.shared.errors import AppError
from authgate.shared.logging import logger

AUTH_COOKIE = "auth_token"


class TokenValidator(Protocol):
    def execute(self, token: Token) -> None: ...


class AuthFilter:
    """Require a live ``auth_token`` cookie before running a view.

    Every failure answers with the same redirect to the login page; the
    reason is only written to the server log.
    """

    def __init__(self, *, validator: TokenValidator, login_url: str) -> None:
        self._validator = validator
        self._login_url = login_url

    def _login_redirect(self, reason: str) -> Response:
        logger.warning(f"auth.filter: redirecting: {reason} on {request.method} {request.path}")
        # script_root keeps the mount point when served under a sub-path
        target = f"{request.script_root}{request.path}"
        if request.query_string:
            target = f"{target}?{request.query_string.decode('latin-1')}"
        return redirect(f"{self._login_url}?{urlencode({'redirect': target})}", code=302)

    def protect(self, view: Callable[..., Any]) -> Callable[..., Any]:
        """Wrap ``view(token, *args, **kwargs)`` as a regular Flask view."""

        @wraps(view)
        def inner(*args, **kwargs):
            cookie = request.cookies.get(AUTH_COOKIE)
            if cookie is None:
                return self._login_redirect("no auth_token cookie")

            try:
                token = Token.parse(cookie)
            except AppError as exc:
                return self._login_redirect(f"parsing auth_token cookie: {exc.code}")

            try:
                self._validator.execute(token)
            except AppError as exc:
                return self._login_redirect(f"invalid auth_token cookie: {exc}")

            return view(token, *args, **kwargs)

        return inner


__all__ = ["AUTH_COOKIE", "AuthFilter", "TokenValidator"]
