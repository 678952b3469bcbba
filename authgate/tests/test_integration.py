from __future__ import annotations

from flask import Flask

from authgate.app import create_app
from authgate.container import Container
from authgate.domain.users.entities import Token
from authgate.shared.config import AppConfig

from .support import LOGIN_URL, FakeClock


def _cookie_header(response) -> dict[str, str]:
    name_value = response.headers["Set-Cookie"].split(";", 1)[0]
    return {"Cookie": name_value}


def test_signup_then_access_secured_resource(app: Flask) -> None:
    client = app.test_client(use_cookies=False)

    first = client.get("/secured?page=2")
    assert first.status_code == 302
    assert first.headers["Location"] == f"{LOGIN_URL}?redirect=%2Fsecured%3Fpage%3D2"

    signup = client.post(
        "/auth/signup?redirect=%2Fsecured%3Fpage%3D2",
        data={"email": "a@x.com", "password": "pw1"},
    )
    assert signup.status_code == 302
    assert signup.headers["Location"] == "/secured?page=2"

    secured = client.get("/secured?page=2", headers=_cookie_header(signup))
    assert secured.status_code == 200
    assert len(secured.data) == 16
    assert str(Token(secured.data)) == _cookie_header(signup)["Cookie"].split("=", 1)[1]


def test_each_login_issues_a_distinct_token(app: Flask, container: Container) -> None:
    container.register_user_use_case.execute("a@x.com", "pw1")
    client = app.test_client(use_cookies=False)
    form = {"email": "a@x.com", "password": "pw1"}

    first = client.post("/auth/login", data=form)
    second = client.post("/auth/login", data=form)

    assert _cookie_header(first) != _cookie_header(second)
    for response in (first, second):
        assert client.get("/secured", headers=_cookie_header(response)).status_code == 200


def test_security_headers_present(app: Flask) -> None:
    response = app.test_client().get("/auth/login")

    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["Cache-Control"] == "no-store"
    assert "Strict-Transport-Security" not in response.headers


def test_request_id_is_echoed(app: Flask) -> None:
    client = app.test_client()

    given = client.get("/auth/login", headers={"X-Request-ID": "req-1"})
    generated = client.get("/auth/login")

    assert given.headers["X-Request-ID"] == "req-1"
    assert generated.headers["X-Request-ID"] not in ("", "-", "req-1")


def test_empty_prefix_mounts_at_root(config: AppConfig, container: Container) -> None:
    rooted = config.model_copy(
        update={"auth": config.auth.model_copy(update={"prefix": ""})}
    )
    app = create_app(rooted, container=container)
    client = app.test_client(use_cookies=False)

    assert client.get("/login").status_code == 200
    assert client.get("/auth/login").status_code == 404


def test_reaper_started_when_interval_configured(config: AppConfig, clock: FakeClock) -> None:
    periodic = config.model_copy(
        update={"auth": config.auth.model_copy(update={"reap_interval_seconds": 60.0})}
    )
    container = Container(periodic, clock=clock)
    create_app(periodic, container=container)
    try:
        assert container.token_reaper.running
    finally:
        container.token_reaper.stop()
        container.engine.dispose()

    assert not container.token_reaper.running
