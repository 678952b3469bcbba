# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from authgate.domain.users.repositories import CredentialStore
from authgate.infrastructure.db import SessionFactory, session_scope
from authgate.shared.errors import InternalError


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        session_factory: SessionFactory,
        credentials: CredentialStore,
    ) -> None:
        self._session_factory = session_factory
        self._credentials = credentials

    def execute(self, email: str, password: str, *, user_id: str | None = None) -> str:
        """Create a user, identified by its email unless ``user_id`` is given."""
        user_id = user_id or email
        try:
            with session_scope(self._session_factory) as session:
                self._credentials.register(session, user_id, email, password)
        except SQLAlchemyError as exc:
            raise InternalError("register user") from exc
        return user_id
