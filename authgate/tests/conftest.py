from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from flask import Flask

from authgate.app import create_app
from authgate.application.services.password_hashing import WerkzeugPasswordHasher
from authgate.container import Container
from authgate.infrastructure.db import init_db
from authgate.shared.config import AppConfig, AuthConfig, DatabaseConfig, ServerConfig

from .support import LOGIN_URL, FakeClock


@pytest.fixture()
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        app_env="test",
        database=DatabaseConfig(url=f"sqlite:///{tmp_path / 'auth.sqlite'}", pool_timeout=5.0),
        auth=AuthConfig(prefix="/auth", login_url=LOGIN_URL, reap_interval_seconds=0),
        server=ServerConfig(),
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 1, 12, 0, tzinfo=UTC))


@pytest.fixture()
def container(config: AppConfig, clock: FakeClock) -> Iterator[Container]:
    container = Container(
        config,
        password_hasher=WerkzeugPasswordHasher(method="pbkdf2:sha256:1000"),
        clock=clock,
    )
    init_db(container.engine)
    yield container
    container.engine.dispose()


@pytest.fixture()
def app(config: AppConfig, container: Container) -> Flask:
    app = create_app(config, container=container)
    app.config.update(TESTING=True)
    return app

