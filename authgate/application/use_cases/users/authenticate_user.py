# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError

from authgate.application.services.clock import Clock, utc_now
from authgate.domain.users.entities import SessionToken
from authgate.domain.users.exceptions import BadCredentialsError
from authgate.domain.users.repositories import CredentialStore, TokenStore
from authgate.infrastructure.db import SessionFactory
from authgate.infrastructure.unit_of_work import SqlAlchemyUnitOfWork
from authgate.shared.errors import AppError, InternalError
from authgate.shared.logging import logger


class AuthenticateUserUseCase:
    """Verify credentials and mint a token inside one transaction.

    Either the password check passes and the token row is committed, or
    nothing is written at all.
    """

    def __init__(
        self,
        *,
        session_factory: SessionFactory,
        credentials: CredentialStore,
        tokens: TokenStore,
        token_lifetime: timedelta = timedelta(hours=24),
        clock_skew: timedelta = timedelta(seconds=1),
        clock: Clock = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._credentials = credentials
        self._tokens = tokens
        self._token_lifetime = token_lifetime
        self._clock_skew = clock_skew
        self._clock = clock

    def execute(self, email: str, password: str) -> SessionToken:
        now = self._clock()
        uow = SqlAlchemyUnitOfWork(self._session_factory)
        try:
            with uow:
                session = uow.enter_step("verify credentials")
                verified_id = self._credentials.verify_password(session, email, password)

                session = uow.enter_step("lookup email")
                user_id = self._credentials.resolve_user_id(session, email)
                if user_id != verified_id:
                    # password belonged to a different account than the email
                    raise BadCredentialsError()

                session = uow.enter_step("generate token")
                issued = self._tokens.generate(
                    session,
                    user_id,
                    now - self._clock_skew,
                    now + self._token_lifetime,
                )
        except BadCredentialsError:
            logger.info(f"auth.authenticate: rejected at {uow.step}")
            raise
        except InternalError:
            raise
        except (AppError, SQLAlchemyError) as exc:
            raise InternalError(uow.step) from exc

        logger.info(
            f"auth.authenticate: issued token for user={issued.user_id} "
            f"exp={issued.expires_at.isoformat()}"
        )
        return issued
