# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

from authgate.shared.logging import logger

from .base import AppError, ErrorCode


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    return jsonify(error.to_dict()), error.status


def register_error_handler(
    app: Flask,
    *,
    debug_mode: bool = False,
    default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
) -> None:
    """Render errors as ``{"error": <code>}`` JSON.

    Client errors are logged at warning level with their code. Server errors
    are logged with the exception chain; the client only sees the code.
    """

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        where = f"{request.method} {request.path}"
        if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.opt(exception=exc).error(f"errors: {exc.code} on {where}: {exc}")
        else:
            logger.warning(f"errors: {exc.code} on {where}")
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        return exc

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        where = f"{request.method} {request.path}"
        if debug_mode:
            logger.exception(f"errors: unhandled {type(exc).__name__} on {where}")
        else:
            logger.error(f"errors: unhandled {type(exc).__name__} on {where}")
        return jsonify({"error": ErrorCode.INTERNAL_ERROR.value}), default_status


def render_method_not_allowed(exc: HTTPException) -> tuple[Response, int]:
    return jsonify({"error": "method_not_allowed"}), exc.code or HTTPStatus.METHOD_NOT_ALLOWED
