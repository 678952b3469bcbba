from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
from flask import Flask

from authgate.container import Container
from authgate.domain.users.entities import SessionToken, Token
from authgate.interfaces.http.controllers.auth_controller import (
    AuthController,
    format_auth_cookie,
)
from authgate.shared.errors import InternalError
from authgate.shared.middleware.error_handler import configure_error_handling

from .support import FakeClock, count_tokens

CREDENTIALS = {"email": "a@x.com", "password": "pw1"}


def _client(app: Flask):
    return app.test_client(use_cookies=False)


def _cookie_value(set_cookie: str) -> str:
    name_value = set_cookie.split(";", 1)[0]
    assert name_value.startswith("auth_token=")
    return name_value[len("auth_token="):]


@pytest.fixture()
def registered(container: Container) -> str:
    return container.register_user_use_case.execute("a@x.com", "pw1")


def test_format_auth_cookie() -> None:
    issued = SessionToken(
        user_id="a@x.com",
        token=Token(b"\x00" * 16),
        starts_at=datetime(2026, 1, 1, 11, 59, 59, tzinfo=UTC),
        expires_at=datetime(2026, 1, 2, 12, 0, 0, 250000, tzinfo=UTC),
    )

    assert format_auth_cookie(issued) == (
        "auth_token=AAAAAAAAAAAAAAAAAAAAAA==; Expires=2026-01-02T12:00:00Z; Secure; Path=/"
    )


@pytest.mark.parametrize(("path", "title"), [("/auth/login", "Login"), ("/auth/signup", "Sign Up")])
def test_get_renders_form_with_query(app: Flask, path: str, title: str) -> None:
    response = _client(app).get(f"{path}?redirect=%2Fsecured")

    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert f"<h1>{title}</h1>" in body
    assert 'method="post"' in body
    assert "?redirect=%2Fsecured" in body


def test_get_form_without_query(app: Flask) -> None:
    body = _client(app).get("/auth/login").get_data(as_text=True)

    assert 'action="login"' in body
    assert 'href="signup"' in body


def test_login_success_sets_cookie_and_redirects(
    app: Flask, container: Container, clock: FakeClock, registered: str
) -> None:
    response = _client(app).post("/auth/login?redirect=%2Fsecured%3Fx%3D1", data=CREDENTIALS)

    assert response.status_code == 302
    assert response.headers["Location"] == "/secured?x=1"
    cookies = response.headers.getlist("Set-Cookie")
    assert len(cookies) == 1
    assert cookies[0].endswith("; Expires=2026-01-02T12:00:00Z; Secure; Path=/")
    token = Token.parse(_cookie_value(cookies[0]))
    container.validate_token_use_case.execute(token)
    assert count_tokens(container, registered) == 1


def test_login_defaults_redirect_to_root(app: Flask, registered: str) -> None:
    response = _client(app).post("/auth/login", data=CREDENTIALS)

    assert response.status_code == 302
    assert response.headers["Location"] == "/"


@pytest.mark.parametrize(
    "form",
    [
        {"email": "a@x.com", "password": "wrong"},
        {"email": "nobody@x.com", "password": "pw1"},
    ],
)
def test_login_bad_credentials(
    app: Flask, container: Container, registered: str, form: dict[str, str]
) -> None:
    response = _client(app).post("/auth/login", data=form)

    assert response.status_code == 401
    assert response.get_json() == {"error": "bad_credentials"}
    assert "Set-Cookie" not in response.headers
    assert count_tokens(container) == 0


@pytest.mark.parametrize("form", [{}, {"email": "a@x.com"}, {"password": "pw1"}])
def test_login_missing_fields(app: Flask, form: dict[str, str]) -> None:
    response = _client(app).post("/auth/login", data=form)

    assert response.status_code == 400
    assert response.get_json()["error"] == "validation_error"


@pytest.mark.parametrize("method", ["PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "PROPFIND"])
@pytest.mark.parametrize("path", ["/auth/login", "/auth/signup"])
def test_other_methods_are_bad_requests(app: Flask, method: str, path: str) -> None:
    response = _client(app).open(path, method=method)

    assert response.status_code == 400
    assert response.get_json()["error"] == "invalid_method"


def test_other_routes_keep_method_not_allowed(app: Flask) -> None:
    response = _client(app).post("/secured")

    assert response.status_code == 405
    assert response.get_json() == {"error": "method_not_allowed"}


def test_signup_creates_user_and_logs_in(app: Flask, container: Container) -> None:
    response = _client(app).post("/auth/signup?redirect=%2Fsecured", data=CREDENTIALS)

    assert response.status_code == 302
    assert response.headers["Location"] == "/secured"
    token = Token.parse(_cookie_value(response.headers["Set-Cookie"]))
    container.validate_token_use_case.execute(token)
    assert count_tokens(container, "a@x.com") == 1


def test_signup_duplicate_is_bad_request(app: Flask, container: Container, registered: str) -> None:
    response = _client(app).post("/auth/signup", data=CREDENTIALS)

    assert response.status_code == 400
    assert response.get_json()["error"] == "duplicate_key"
    assert "Set-Cookie" not in response.headers
    assert count_tokens(container) == 0


def test_signup_invalid_email(app: Flask) -> None:
    response = _client(app).post("/auth/signup", data={"email": "nope", "password": "pw1"})

    assert response.status_code == 400
    assert response.get_json()["error"] == "invalid_email"


def test_internal_errors_are_opaque() -> None:
    register = MagicMock()
    register.execute.side_effect = InternalError("insert user")
    authenticate = MagicMock()
    controller = AuthController(register_use_case=register, authenticate_use_case=authenticate)

    app = Flask(__name__)
    configure_error_handling(app)
    app.register_blueprint(controller.as_blueprint("/auth"))

    response = _client(app).post("/auth/signup", data=CREDENTIALS)

    assert response.status_code == 500
    assert response.get_json() == {"error": "internal_error"}
    authenticate.execute.assert_not_called()


def test_blueprint_prefix_is_configurable() -> None:
    authenticate = MagicMock()
    controller = AuthController(register_use_case=MagicMock(), authenticate_use_case=authenticate)
    app = Flask(__name__)
    app.register_blueprint(controller.as_blueprint(""))

    assert _client(app).get("/login").status_code == 200
    assert _client(app).get("/auth/login").status_code == 404
