# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from datetime import timedelta
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_GROUP_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    frozen=True,
    validate_by_name=True,
)


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///auth.sqlite", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _GROUP_CONFIG

    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    def sqlite_path(self) -> Path | None:
        """File backing a ``sqlite:///`` URL, or None for memory/other backends."""
        prefix = "sqlite:///"
        if not self.url.startswith(prefix):
            return None
        raw = self.url[len(prefix):]
        if not raw or raw == ":memory:":
            return None
        return Path(raw)


class AuthConfig(BaseSettings):
    prefix: str = Field("/auth", alias="AUTH_PREFIX")
    login_url: str = Field("http://localhost:8090/auth/login", alias="LOGIN_URL")
    token_lifetime_seconds: int = Field(24 * 60 * 60, ge=1, alias="TOKEN_LIFETIME_SECONDS")
    clock_skew_seconds: float = Field(1.0, ge=0, alias="TOKEN_CLOCK_SKEW_SECONDS")
    reap_interval_seconds: float = Field(0.0, ge=0, alias="TOKEN_REAP_INTERVAL_SECONDS")
    reap_grace_seconds: float = Field(300.0, ge=0, alias="TOKEN_REAP_GRACE_SECONDS")

    model_config = _GROUP_CONFIG

    @field_validator("prefix", mode="after")
    @classmethod
    def _normalise_prefix(cls, value: str) -> str:
        value = "/" + value.strip("/")
        return "" if value == "/" else value

    @property
    def token_lifetime(self) -> timedelta:
        return timedelta(seconds=self.token_lifetime_seconds)

    @property
    def clock_skew(self) -> timedelta:
        return timedelta(seconds=self.clock_skew_seconds)

    @property
    def reap_grace(self) -> timedelta:
        return timedelta(seconds=self.reap_grace_seconds)


class ServerConfig(BaseSettings):
    host: str = Field("localhost", alias="LISTEN_HOST")
    port: int = Field(8090, ge=1, le=65535, alias="LISTEN_PORT")
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _GROUP_CONFIG

    @field_validator("enable_hsts", mode="before")
    @classmethod
    def _parse_hsts(cls, value: str | bool) -> bool:
        return _parse_bool(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _auth_config_factory() -> AuthConfig:
    return AuthConfig()  # type: ignore[call-arg]


def _server_config_factory() -> ServerConfig:
    return ServerConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_file: str | None = Field(None, alias="LOG_FILE")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    auth: AuthConfig = Field(default_factory=_auth_config_factory)
    server: ServerConfig = Field(default_factory=_server_config_factory)

    model_config = _GROUP_CONFIG

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @field_validator("log_level", mode="after")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        warnings = []
        if not self.server.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")
        if not self.auth.login_url.startswith("https://"):
            warnings.append("⚠️  LOGIN_URL is not served over HTTPS, Secure cookies will not be sent")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)
            print(
                "   Consider enabling these security features in production.\n",
                file=sys.stderr,
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug_logging else self.log_level


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = ["AppConfig", "AuthConfig", "DatabaseConfig", "ServerConfig", "load_config"]
