"""
Security utilities: verification of Supabase Auth access tokens.
"""

from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from uuid import UUID

from eido.config import get_settings


def create_access_token(user_id: UUID | str, extra_data: dict | None = None) -> str:
    """Mint an access token shaped like the ones Supabase Auth issues.

    The service never issues tokens to clients; this exists for tests and
    local scripts that need to call the API as a given user.
    """
    settings = get_settings()

    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "aud": settings.JWT_AUDIENCE,
        "role": "authenticated",
        "exp": now + timedelta(minutes=settings.JWT_EXPIRY_MINUTES),
        "iat": now,
    }
    if extra_data:
        payload.update(extra_data)

    return jwt.encode(payload, settings.SUPABASE_JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    """Decode and validate an access token. Returns payload or None if invalid."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
        )
        return payload
    except JWTError:
        return None
