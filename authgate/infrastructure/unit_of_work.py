# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Store transactions spanning several repository calls."""

from __future__ import annotations

from types import TracebackType

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from authgate.infrastructure.db import SessionFactory
from authgate.shared.errors import InternalError
from authgate.shared.logging import logger


class SqlAlchemyUnitOfWork:
    """Transaction over one SQLAlchemy session.

    Callers name each stage with :meth:`enter_step`; the current name is kept
    on ``step`` so a failure can be reported against the stage that raised.
    A failed commit surfaces as ``InternalError("commit")``.
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None
        self.step = "open transaction"

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        session = self._session_factory()
        try:
            session.begin()
        except SQLAlchemyError as exc:
            session.close()
            raise InternalError(self.step) from exc
        self._session = session
        logger.debug("uow: transaction opened")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        session = self._session
        assert session is not None
        self._session = None
        try:
            if exc is not None:
                session.rollback()
                logger.debug(f"uow: rolled back at {self.step} ({exc_type.__name__})")
                return
            self.step = "commit"
            try:
                session.commit()
            except SQLAlchemyError as commit_exc:
                session.rollback()
                raise InternalError(self.step) from commit_exc
            logger.debug("uow: committed")
        finally:
            session.close()

    def enter_step(self, step: str) -> Session:
        if self._session is None:
            raise RuntimeError(f"step {step!r} started outside the transaction")
        self.step = step
        return self._session
