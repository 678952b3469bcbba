# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC

from flask import Blueprint, Response, redirect, request
from pydantic import ValidationError
from werkzeug.exceptions import MethodNotAllowed

from authgate.application.use_cases.users.authenticate_user import AuthenticateUserUseCase
from authgate.application.use_cases.users.register_user import RegisterUserUseCase
from authgate.domain.users.entities import SessionToken
from authgate.interfaces.http.dto.auth import LoginFormDTO, SignupFormDTO
from authgate.interfaces.http.filters.auth_filter import AUTH_COOKIE
from authgate.interfaces.http.pages.templates import render_login_page, render_signup_page
from authgate.shared.errors import ErrorCode
from authgate.shared.errors import ValidationError as AppValidationError
from authgate.shared.errors.http import handle_app_error, render_method_not_allowed
from authgate.shared.errors.validation import raise_validation_error
from authgate.shared.logging import logger

# methods routed to the views; anything else is caught as MethodNotAllowed
ROUTE_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def format_auth_cookie(issued: SessionToken) -> str:
    expires = issued.expires_at.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
    return f"{AUTH_COOKIE}={issued.token}; Expires={expires}; Secure; Path=/"


def _invalid_method() -> AppValidationError:
    return AppValidationError(ErrorCode.INVALID_METHOD.value, context={"method": request.method})


def _reject_method() -> None:
    raise _invalid_method()


def _query_string() -> str:
    return request.query_string.decode("latin-1")


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        authenticate_use_case: AuthenticateUserUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._authenticate_use_case = authenticate_use_case

    def _issue_token(self, email: str, password: str) -> Response:
        issued = self._authenticate_use_case.execute(email, password)

        target = request.args.get("redirect") or "/"
        response = redirect(target, code=302)
        response.headers.add("Set-Cookie", format_auth_cookie(issued))
        logger.info(f"auth.login: ok user_id={issued.user_id}")
        return response

    def login(self):
        if request.method in ("GET", "HEAD"):
            return render_login_page(_query_string())
        if request.method != "POST":
            _reject_method()

        try:
            dto = LoginFormDTO.model_validate(request.form.to_dict())
        except ValidationError as exc:
            raise_validation_error(exc)

        return self._issue_token(dto.email, dto.password)

    def signup(self):
        if request.method in ("GET", "HEAD"):
            return render_signup_page(_query_string())
        if request.method != "POST":
            _reject_method()

        try:
            dto = SignupFormDTO.model_validate(request.form.to_dict())
        except ValidationError as exc:
            raise_validation_error(exc)

        user_id = self._register_use_case.execute(dto.email, dto.password)
        logger.info(f"auth.signup: ok user_id={user_id}")
        return self._issue_token(dto.email, dto.password)

    def as_blueprint(self, url_prefix: str = "/auth") -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix=url_prefix or None)
        bp.add_url_rule(
            "/login",
            view_func=self.login,
            methods=ROUTE_METHODS,
            provide_automatic_options=False,
        )
        bp.add_url_rule(
            "/signup",
            view_func=self.signup,
            methods=ROUTE_METHODS,
            provide_automatic_options=False,
        )

        prefix = url_prefix.rstrip("/")
        auth_paths = {f"{prefix}/login", f"{prefix}/signup"}

        @bp.app_errorhandler(MethodNotAllowed)
        def _method_not_allowed(exc: MethodNotAllowed):
            # every method other than GET/POST on the auth pages is a bad request
            if request.path in auth_paths:
                logger.warning(f"auth: {request.method} not accepted on {request.path}")
                return handle_app_error(_invalid_method())
            return render_method_not_allowed(exc)

        return bp
