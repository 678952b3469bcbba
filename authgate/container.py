# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Application dependency container."""

from __future__ import annotations

from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from authgate.application.services.clock import Clock, utc_now
from authgate.application.services.password_hashing import WerkzeugPasswordHasher
from authgate.application.use_cases.users.authenticate_user import AuthenticateUserUseCase
from authgate.application.use_cases.users.reap_tokens import ReapTokensUseCase
from authgate.application.use_cases.users.register_user import RegisterUserUseCase
from authgate.application.use_cases.users.validate_token import ValidateTokenUseCase
from authgate.domain.users.repositories import PasswordHasher
from authgate.infrastructure.db import create_db_engine, create_session_factory
from authgate.infrastructure.reaper import TokenReaper
from authgate.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyCredentialStore,
    SqlAlchemyTokenStore,
)
from authgate.interfaces.http.controllers.auth_controller import AuthController
from authgate.interfaces.http.filters.auth_filter import AuthFilter
from authgate.shared.config import AppConfig


class Container:
    def __init__(
        self,
        config: AppConfig,
        *,
        password_hasher: PasswordHasher | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.config = config
        self.clock = clock
        self._password_hasher = password_hasher

    @cached_property
    def engine(self) -> Engine:
        return create_db_engine(self.config.database)

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return create_session_factory(self.engine)

    @cached_property
    def password_hasher(self) -> PasswordHasher:
        return self._password_hasher or WerkzeugPasswordHasher()

    @cached_property
    def credential_store(self) -> SqlAlchemyCredentialStore:
        return SqlAlchemyCredentialStore(self.password_hasher)

    @cached_property
    def token_store(self) -> SqlAlchemyTokenStore:
        return SqlAlchemyTokenStore()

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            session_factory=self.session_factory,
            credentials=self.credential_store,
        )

    @cached_property
    def authenticate_user_use_case(self) -> AuthenticateUserUseCase:
        return AuthenticateUserUseCase(
            session_factory=self.session_factory,
            credentials=self.credential_store,
            tokens=self.token_store,
            token_lifetime=self.config.auth.token_lifetime,
            clock_skew=self.config.auth.clock_skew,
            clock=self.clock,
        )

    @cached_property
    def validate_token_use_case(self) -> ValidateTokenUseCase:
        return ValidateTokenUseCase(
            session_factory=self.session_factory,
            tokens=self.token_store,
            clock=self.clock,
        )

    @cached_property
    def reap_tokens_use_case(self) -> ReapTokensUseCase:
        return ReapTokensUseCase(
            session_factory=self.session_factory,
            tokens=self.token_store,
            grace=self.config.auth.reap_grace,
            clock=self.clock,
        )

    @cached_property
    def token_reaper(self) -> TokenReaper:
        return TokenReaper(
            self.reap_tokens_use_case,
            interval_seconds=self.config.auth.reap_interval_seconds,
        )

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            authenticate_use_case=self.authenticate_user_use_case,
        )

    @cached_property
    def auth_filter(self) -> AuthFilter:
        return AuthFilter(
            validator=self.validate_token_use_case,
            login_url=self.config.auth.login_url,
        )
