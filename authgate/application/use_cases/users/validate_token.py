# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from authgate.application.services.clock import Clock, utc_now
from authgate.domain.users.entities import Token
from authgate.domain.users.repositories import TokenStore
from authgate.infrastructure.db import SessionFactory, session_scope
from authgate.shared.errors import InternalError


class ValidateTokenUseCase:
    """Yes/no gate over token lookup; the owning user is never returned."""

    def __init__(
        self,
        *,
        session_factory: SessionFactory,
        tokens: TokenStore,
        clock: Clock = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._tokens = tokens
        self._clock = clock

    def execute(self, token: Token) -> None:
        try:
            with session_scope(self._session_factory) as session:
                self._tokens.lookup(session, token, self._clock())
        except SQLAlchemyError as exc:
            raise InternalError("lookup token") from exc
