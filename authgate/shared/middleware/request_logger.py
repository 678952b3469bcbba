# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-request access logging with a request id carried through loguru."""

from __future__ import annotations

import hashlib
import secrets
import time
from collections.abc import Iterable, Mapping

from flask import Flask, g, request
from werkzeug.wrappers import Response

from authgate.shared.logging import clear_request_id, get_request_id, logger, set_request_id

REQUEST_ID_HEADER = "X-Request-ID"

_REDACTED_HEADERS = frozenset({"authorization", "cookie", "set-cookie"})
# form fields and query params whose values never reach the log
_SECRET_FIELDS = frozenset({"password", "auth_token", "token"})


def _fingerprint(value: str) -> str:
    return f"<sha256:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def _redact(items: Iterable[tuple[str, str]], secret_keys: frozenset[str]) -> dict[str, str]:
    return {
        key: _fingerprint(value) if key.lower() in secret_keys else value
        for key, value in items
    }


def _describe_request(debug_mode: bool) -> str:
    line = f"{request.method} {request.path} from {_client_ip()}"
    if not debug_mode:
        return line
    details: Mapping[str, object] = {
        "query": _redact(request.args.items(), _SECRET_FIELDS),
        "form_fields": sorted(request.form.keys()),
        "headers": _redact(request.headers.items(), _REDACTED_HEADERS),
    }
    return f"{line} {details}"


def configure_request_logging(app: Flask, *, debug_mode: bool = False) -> None:
    """Log each request and its outcome.

    The incoming ``X-Request-ID`` (or a fresh one) is bound to every log line
    written while the request runs and echoed on the response.
    """

    @app.before_request
    def _start() -> None:
        set_request_id(request.headers.get(REQUEST_ID_HEADER) or secrets.token_hex(6))
        g.request_started = time.perf_counter()
        log = logger.debug if debug_mode else logger.info
        log(f"http: -> {_describe_request(debug_mode)}")

    @app.after_request
    def _finish(response: Response) -> Response:
        started = g.get("request_started", time.perf_counter())
        elapsed_ms = (time.perf_counter() - started) * 1000
        location = response.headers.get("Location")
        suffix = f" -> {location}" if location and response.status_code == 302 else ""
        logger.info(
            f"http: <- {request.method} {request.path} "
            f"{response.status_code} in {elapsed_ms:.1f}ms{suffix}"
        )
        response.headers.setdefault(REQUEST_ID_HEADER, get_request_id())
        return response

    @app.teardown_request
    def _teardown(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"http: {type(exc).__name__} on {request.method} {request.path}")
        clear_request_id()


__all__ = ["REQUEST_ID_HEADER", "configure_request_logging"]
