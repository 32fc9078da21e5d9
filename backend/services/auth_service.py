"""Authentication service: shared password check and signed auth cookie."""

from __future__ import annotations

import logging
import secrets
from datetime import timedelta
from typing import Any

from jose import JWTError, jwt

from backend.services.datetime_service import now_utc

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
AUTH_COOKIE_NAME = "workdash-auth"
_TOKEN_TYPE = "dashboard"


def verify_dashboard_password(candidate: str, expected: str) -> bool:
    """Compare a submitted password to the configured one in constant time."""
    return secrets.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def create_auth_token(secret_key: str, expires_days: int) -> str:
    """Create the signed value stored in the auth cookie."""
    payload: dict[str, Any] = {
        "sub": "dashboard",
        "type": _TOKEN_TYPE,
        "exp": now_utc() + timedelta(days=expires_days),
    }
    return str(jwt.encode(payload, secret_key, algorithm=ALGORITHM))


def is_valid_auth_token(token: str | None, secret_key: str) -> bool:
    """Return True for an unexpired token signed with ``secret_key``."""
    if not token:
        return False
    try:
        payload: dict[str, Any] = jwt.decode(token, secret_key, algorithms=[ALGORITHM])
    except JWTError:
        logger.debug("Rejected auth cookie", exc_info=True)
        return False
    return payload.get("type") == _TOKEN_TYPE
