# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .session import (
    Base,
    SessionFactory,
    create_db_engine,
    create_session_factory,
    describe_db,
    init_db,
    session_scope,
)

__all__ = [
    "Base",
    "SessionFactory",
    "create_db_engine",
    "create_session_factory",
    "describe_db",
    "init_db",
    "session_scope",
]
