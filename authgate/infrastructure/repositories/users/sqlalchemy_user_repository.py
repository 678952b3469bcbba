# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from datetime import datetime

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import case, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from authgate.domain.users.entities import TOKEN_SIZE, SessionToken, Token, from_millis, to_millis
from authgate.domain.users.exceptions import BadCredentialsError, DuplicateKeyError, InvalidTokenError
from authgate.domain.users.repositories import CredentialStore, PasswordHasher, TokenStore
from authgate.infrastructure.db.models import Token as TokenRow
from authgate.infrastructure.db.models import User as UserRow
from authgate.shared.errors import ErrorCode, InternalError, ValidationError
from authgate.shared.logging import logger

_EMAIL = TypeAdapter(EmailStr)


def parse_email(email: str) -> str:
    try:
        return _EMAIL.validate_python(email)
    except PydanticValidationError as exc:
        raise ValidationError(ErrorCode.INVALID_EMAIL.value, context={"email": email}) from exc


class SqlAlchemyCredentialStore(CredentialStore):
    def __init__(self, password_hasher: PasswordHasher) -> None:
        self._password_hasher = password_hasher
        # compared against when the user is unknown so both failures cost the same
        self._dummy_hash = password_hasher.hash(secrets.token_urlsafe(16))

    def register(self, session: Session, user_id: str, email: str, password: str) -> None:
        parse_email(email)
        try:
            existing = (
                session.query(UserRow.id, UserRow.email)
                .filter(or_(UserRow.id == user_id, UserRow.email == email))
                .first()
            )
        except SQLAlchemyError as exc:
            raise InternalError("lookup user") from exc
        if existing is not None:
            field = "id" if existing.id == user_id else "email"
            raise DuplicateKeyError(context={"field": field})

        hashed = self._password_hasher.hash(password)
        try:
            session.add(UserRow(id=user_id, email=email, password_hash=hashed))
            session.flush()
        except IntegrityError as exc:
            # lost a race against a concurrent registration
            raise DuplicateKeyError() from exc
        except SQLAlchemyError as exc:
            raise InternalError("insert user") from exc
        logger.info(f"users.register: ok user_id={user_id}")

    def verify_password(self, session: Session, id_or_email: str, password: str) -> str:
        """Check ``password`` and return the id of the user it was checked against.

        An email match wins over an id match, so an identifier that is one
        user's email and another user's id always selects the email owner.
        """
        try:
            row = (
                session.query(UserRow.id, UserRow.password_hash)
                .filter(or_(UserRow.id == id_or_email, UserRow.email == id_or_email))
                .order_by(case((UserRow.email == id_or_email, 0), else_=1))
                .first()
            )
        except SQLAlchemyError as exc:
            raise InternalError("lookup password hash") from exc

        hashed = row.password_hash if row is not None else None
        if hashed is None:
            self._password_hasher.verify(password, self._dummy_hash)
            logger.debug("users.verify: rejected, unknown identifier")
            raise BadCredentialsError()
        if not self._password_hasher.verify(password, hashed):
            logger.debug("users.verify: rejected, password mismatch")
            raise BadCredentialsError()
        return row.id

    def resolve_user_id(self, session: Session, email: str) -> str:
        try:
            user_id = session.query(UserRow.id).filter(UserRow.email == email).scalar()
        except SQLAlchemyError as exc:
            raise InternalError("lookup user id") from exc
        if user_id is None:
            raise BadCredentialsError()
        return user_id


class SqlAlchemyTokenStore(TokenStore):
    def generate(
        self, session: Session, user_id: str, start: datetime, end: datetime
    ) -> SessionToken:
        start_ms, end_ms = to_millis(start), to_millis(end)
        if start_ms > end_ms:
            raise ValidationError(context={"start": start_ms, "end": end_ms})

        try:
            raw = secrets.token_bytes(TOKEN_SIZE)
        except OSError as exc:
            raise InternalError("read random") from exc

        try:
            session.add(TokenRow(token=raw, user_id=user_id, start_time=start_ms, end_time=end_ms))
            session.flush()
        except SQLAlchemyError as exc:
            raise InternalError("insert token") from exc

        return SessionToken(
            user_id=user_id,
            token=Token(raw),
            starts_at=from_millis(start_ms),
            expires_at=from_millis(end_ms),
        )

    def lookup(self, session: Session, token: Token, now: datetime) -> str:
        now_ms = to_millis(now)
        try:
            user_id = (
                session.query(TokenRow.user_id)
                .filter(
                    TokenRow.token == token.value,
                    TokenRow.start_time <= now_ms,
                    TokenRow.end_time >= now_ms,
                )
                .scalar()
            )
        except SQLAlchemyError as exc:
            raise InternalError("lookup token") from exc
        if user_id is None:
            raise InvalidTokenError()
        return user_id

    def reap(self, session: Session, cutoff: datetime) -> int:
        try:
            deleted = (
                session.query(TokenRow)
                .filter(TokenRow.end_time < to_millis(cutoff))
                .delete(synchronize_session=False)
            )
        except SQLAlchemyError as exc:
            raise InternalError("drop rows") from exc
        return int(deleted or 0)
