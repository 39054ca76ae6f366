"""Password hashing and signed session tokens used by the in-memory identity directory."""

import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.config import settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Nickname and password rules applied before any directory call.
NICKNAME_PATTERN = r"^[a-zA-Z0-9_]{3,20}$"
PASSWORD_MIN_LEN = 6


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_session_token(sub: str, expire_minutes: int | None = None) -> tuple[str, dict[str, Any]]:
    """Create a signed session token for identity ``sub``. Returns (token, payload)."""
    now = datetime.now(UTC)
    minutes = expire_minutes if expire_minutes is not None else settings.SESSION_EXPIRE_MINUTES
    payload: dict[str, Any] = {
        "sub": str(sub),
        "jti": uuid.uuid4().hex,
        "exp": now + timedelta(minutes=minutes),
        "iat": now,
    }
    token = jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )
    return token, payload


def decode_session_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a session token; return payload (sub, jti, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
    )
