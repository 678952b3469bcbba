from __future__ import annotations

from datetime import datetime

from authgate.container import Container
from authgate.infrastructure.db import session_scope
from authgate.infrastructure.db.models import Token as TokenRow

LOGIN_URL = "http://localhost:8090/auth/login"


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def count_tokens(container: Container, user_id: str | None = None) -> int:
    with session_scope(container.session_factory) as session:
        query = session.query(TokenRow)
        if user_id is not None:
            query = query.filter(TokenRow.user_id == user_id)
        return query.count()
