from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from interpretreflect.settings import jwt_secret

ALGORITHM = "HS256"
# Store-issued session tokens carry this audience for signed-in users.
AUDIENCE = "authenticated"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(*, user_id: str, expires_in_minutes: int = 60, audience: str = AUDIENCE) -> str:
    """Mint a token shaped like the store's session tokens (local tooling and tests)."""
    issued_at = _utc_now()
    payload: dict[str, Any] = {
        "sub": user_id,
        "aud": audience,
        "role": audience,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + timedelta(minutes=expires_in_minutes)).timestamp()),
    }
    return jwt.encode(payload, jwt_secret(), algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, jwt_secret(), algorithms=[ALGORITHM], audience=AUDIENCE)
