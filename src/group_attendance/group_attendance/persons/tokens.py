from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ..core.constants import DEFAULT_TOKEN_TTL_HOURS, TOKEN_ALGORITHM
from ..core.exceptions import AuthError


class TokenCodec:
    """Issues and verifies signed, time-limited bearer tokens (JWT, HS256).

    The payload carries the person id only; there is no server-side session.
    """

    def __init__(self, secret: str, *, ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self._ttl = timedelta(hours=int(ttl_hours))

    def issue(self, person_id: int, *, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {"id": int(person_id), "iat": now, "exp": now + self._ttl}
        return jwt.encode(payload, self._secret, algorithm=TOKEN_ALGORITHM)

    def decode(self, token: str) -> int:
        """Return the person id carried by a valid token."""
        try:
            payload = jwt.decode(token, self._secret, algorithms=[TOKEN_ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise AuthError("Token expirado")
        except jwt.InvalidTokenError:
            raise AuthError("Token inválido")

        person_id = payload.get("id")
        if isinstance(person_id, bool) or not isinstance(person_id, int):
            raise AuthError("Token inválido")
        return person_id
