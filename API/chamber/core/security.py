"""
Password hashing, bearer tokens and password-reset tokens.

Tokens are HS256 JWTs carrying {userId, name, email, role, iat, exp}. The role
claim is trusted until the token expires; it is not re-read from the database.
"""
import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Tuple

import bcrypt
import jwt

from chamber.core.config import Settings

# bcrypt only looks at the first 72 bytes and newer releases refuse longer input
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
    except ValueError:
        # malformed hash in storage
        return False


def create_access_token(user: Any, settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "userId": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "iat": now,
        "exp": now + timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> Dict[str, Any]:
    """Verify signature and expiry. Raises jwt.PyJWTError on any failure."""
    return jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["exp", "iat"]},
    )


def hash_reset_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def generate_reset_token() -> Tuple[str, str]:
    """Return (raw token for the link, sha256 hex to store)."""
    raw = secrets.token_hex(32)
    return raw, hash_reset_token(raw)
