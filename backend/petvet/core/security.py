"""Module: security."""

import hashlib
import hmac
import os
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from petvet.core.config import settings
from petvet.core.errors import AuthenticationError

# Shared password hashing format/version marker.
PASSWORD_SCHEME = "pbkdf2_sha256"
PASSWORD_ITERATIONS = 390000


def hash_password(password: str) -> str:
    """
    Create a PBKDF2-SHA256 password hash string.

    Stored format:
      pbkdf2_sha256$<iterations>$<salt_hex>$<hash_hex>
    """
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        PASSWORD_ITERATIONS,
    )
    return f"{PASSWORD_SCHEME}${PASSWORD_ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    """Verify a password against a stored PBKDF2 hash string."""
    if not stored or not stored.startswith(f"{PASSWORD_SCHEME}$"):
        return False

    try:
        _, iterations_raw, salt_hex, hash_hex = stored.split("$", 3)
        iterations = int(iterations_raw)
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(hash_hex)
    except ValueError:
        return False

    computed = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        iterations,
    )
    return hmac.compare_digest(computed, expected)


# Identity claims carried by the session cookie.
@dataclass(frozen=True)
class SessionClaims:
    user_id: str
    username: str
    role: str
    type: str


def encode_session(claims: SessionClaims, expires_seconds: int | None = None) -> str:
    now = datetime.now(tz=UTC)
    ttl = expires_seconds if expires_seconds is not None else settings.session_max_age_seconds
    payload = {
        "sub": claims.user_id,
        "username": claims.username,
        "role": claims.role,
        "type": claims.type,
        "iat": now,
        "exp": now + timedelta(seconds=ttl),
    }
    return jwt.encode(payload, settings.session_secret, algorithm=settings.session_algorithm)


def decode_session(token: str | None) -> SessionClaims:
    """
    Verify the signature and expiry of a session token and return its claims.

    Raises AuthenticationError for missing, tampered, expired or incomplete tokens.
    """
    if not token:
        raise AuthenticationError("Not authenticated")
    try:
        payload = jwt.decode(token, settings.session_secret, algorithms=[settings.session_algorithm])
    except JWTError:
        raise AuthenticationError("Invalid session")

    sub = payload.get("sub")
    if not isinstance(sub, str) or not sub:
        raise AuthenticationError("Invalid session")

    return SessionClaims(
        user_id=sub,
        username=str(payload.get("username") or ""),
        role=str(payload.get("role") or "user"),
        type=str(payload.get("type") or "owner"),
    )
