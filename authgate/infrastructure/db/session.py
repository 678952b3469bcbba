# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Database engine and session helpers."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from authgate.shared.config import DatabaseConfig
from authgate.shared.logging import logger

SessionFactory = Callable[[], Session]


class Base(DeclarativeBase):
    """Declarative base for ORM models."""


def create_db_engine(config: DatabaseConfig) -> Engine:
    connect_args: dict[str, object] = {}
    pool_args: dict[str, object] = {
        "pool_size": config.pool_size,
        "max_overflow": config.max_overflow,
        "pool_timeout": config.pool_timeout,
    }
    if config.is_sqlite():
        connect_args = {
            "check_same_thread": False,
            "timeout": config.pool_timeout,
        }
        if config.sqlite_path() is None:
            # in-memory databases get a singleton pool
            pool_args = {}

    engine = create_engine(
        config.url,
        echo=False,
        pool_pre_ping=True,
        connect_args=connect_args,
        **pool_args,
    )
    if config.is_sqlite():
        _install_sqlite_hooks(engine, busy_timeout_ms=int(config.pool_timeout * 1000))
    return engine


def _install_sqlite_hooks(engine: Engine, *, busy_timeout_ms: int) -> None:
    """Take transaction control away from pysqlite.

    The driver otherwise delays BEGIN until the first write, which would leave
    the reads of a unit of work outside its transaction.
    """

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_conn, _):
        dbapi_conn.isolation_level = None
        cur = dbapi_conn.cursor()
        try:
            cur.execute("PRAGMA foreign_keys=ON;")
            cur.execute(f"PRAGMA busy_timeout={busy_timeout_ms};")
        finally:
            cur.close()

    @event.listens_for(engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@contextmanager
def session_scope(factory: SessionFactory) -> Iterator[Session]:
    """Session for single-statement consumers; commits on clean exit."""

    session = factory()
    logger.debug("db.session: opened session")
    try:
        yield session
        session.commit()
        logger.debug("db.session: committed session")
    except Exception:
        logger.debug("db.session: error, rolling back")
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> None:
    # models register themselves on Base.metadata
    from authgate.infrastructure.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ensured")


def describe_db(engine: Engine) -> list[str]:
    names = sorted(inspect(engine).get_table_names())
    for name in names:
        logger.info(f"db.describe: table {name}")
    return names
