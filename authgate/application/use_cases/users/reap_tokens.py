# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from authgate.application.services.clock import Clock, utc_now
from authgate.domain.users.repositories import TokenStore
from authgate.infrastructure.db import SessionFactory, session_scope
from authgate.shared.errors import InternalError
from authgate.shared.logging import logger


class ReapTokensUseCase:
    def __init__(
        self,
        *,
        session_factory: SessionFactory,
        tokens: TokenStore,
        grace: timedelta = timedelta(minutes=5),
        clock: Clock = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._tokens = tokens
        self._grace = grace
        self._clock = clock

    def execute(self, cutoff: datetime | None = None) -> int:
        """Delete tokens that ended before ``cutoff``.

        The default cutoff lags the clock by the grace period so tokens issued
        by a process with a slightly different clock are not purged early.
        """
        if cutoff is None:
            cutoff = self._clock() - self._grace
        try:
            with session_scope(self._session_factory) as session:
                deleted = self._tokens.reap(session, cutoff)
        except SQLAlchemyError as exc:
            raise InternalError("reap tokens") from exc
        logger.info(f"tokens.reap: removed {deleted} rows ended before {cutoff.isoformat()}")
        return deleted
