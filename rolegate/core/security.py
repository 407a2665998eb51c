"""Password hashing and signing of session cookies."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from rolegate.core.config import Settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Algorithm used to sign the session cookie.
SESSION_TOKEN_ALGORITHM = "HS256"


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; longer input is truncated.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def sign_session_id(session_id: str, settings: Settings) -> str:
    """Wrap an opaque session id in a signed token suitable for a cookie value."""
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sid": session_id,
        "iat": now,
        "exp": now + timedelta(minutes=settings.SESSION_EXPIRE_MINUTES),
    }
    return jwt.encode(
        payload,
        settings.SESSION_SECRET.get_secret_value(),
        algorithm=SESSION_TOKEN_ALGORITHM,
    )


def unsign_session_id(token: str, settings: Settings) -> str | None:
    """
    Return the session id carried by a cookie value.

    Returns None when the signature is wrong, the token expired or the payload
    has no session id.
    """
    try:
        payload = jwt.decode(
            token,
            settings.SESSION_SECRET.get_secret_value(),
            algorithms=[SESSION_TOKEN_ALGORITHM],
        )
    except jwt.PyJWTError:
        return None
    sid = payload.get("sid")
    if not isinstance(sid, str) or not sid:
        return None
    return sid
