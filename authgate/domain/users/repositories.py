# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from sqlalchemy.orm import Session

from .entities import SessionToken, Token


class CredentialStore(Protocol):
    def register(self, session: Session, user_id: str, email: str, password: str) -> None: ...
    def verify_password(self, session: Session, id_or_email: str, password: str) -> str: ...
    def resolve_user_id(self, session: Session, email: str) -> str: ...


class TokenStore(Protocol):
    def generate(
        self, session: Session, user_id: str, start: datetime, end: datetime
    ) -> SessionToken: ...
    def lookup(self, session: Session, token: Token, now: datetime) -> str: ...
    def reap(self, session: Session, cutoff: datetime) -> int: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
