"""Password hashing and bearer token issuance."""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from jwt import ExpiredSignatureError, InvalidTokenError

from models.user import User
from config import JWT_SECRET, JWT_ALGORITHM, TOKEN_TTL_HOURS, MAX_PASSWORD_BYTES

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Raised when a token cannot be issued or verified."""


@dataclass
class TokenClaims:
    """Identity carried by a bearer token."""
    user_id: int
    email: str
    role: str


def hash_password(password: str) -> str:
    """
    Hash a password with bcrypt.

    Raises:
        ValueError: If the password is longer than MAX_PASSWORD_BYTES
    """
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        # No stored hash can match a password that could never be hashed
        return False

    try:
        return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Stored password hash is malformed")
        return False


def _require_secret(secret: Optional[str]) -> str:
    secret = secret if secret is not None else JWT_SECRET
    if not secret:
        raise AuthError("JWT_SECRET must be set in environment")
    return secret


def create_token(
    user: User,
    secret: Optional[str] = None,
    ttl: timedelta = timedelta(hours=TOKEN_TTL_HOURS)
) -> str:
    """
    Issue a signed bearer token for a user.

    Args:
        user: Authenticated user
        secret: Signing key (defaults to JWT_SECRET)
        ttl: Token lifetime

    Returns:
        Encoded JWT
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(payload, _require_secret(secret), algorithm=JWT_ALGORITHM)


def decode_token(token: str, secret: Optional[str] = None) -> TokenClaims:
    """
    Verify a bearer token and return its claims.

    Raises:
        AuthError: If the token is expired, tampered with or malformed
    """
    try:
        payload = jwt.decode(
            token,
            _require_secret(secret),
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp", "sub"]}
        )
    except ExpiredSignatureError as e:
        raise AuthError("Session expired. Please log in again.") from e
    except InvalidTokenError as e:
        raise AuthError("Invalid session token") from e

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise AuthError("Invalid session token") from e

    return TokenClaims(
        user_id=user_id,
        email=payload.get("email", ""),
        role=payload.get("role", "")
    )
