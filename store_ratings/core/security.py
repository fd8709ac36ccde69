"""
Security utilities: password hashing, JWT creation/verification and
password-reset token generation.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
import logging
import secrets

from jose import jwt
from passlib.context import CryptContext

from store_ratings.core.config import settings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(plain_password: str) -> str:
    """Return the bcrypt hash of *plain_password*."""
    logger.trace("Hashing user password")
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if *plain_password* matches *hashed_password*."""
    logger.trace("Verifying password hash")
    return pwd_context.verify(plain_password, hashed_password)


# ---------------------------------------------------------------------------
# JWT helpers
# ---------------------------------------------------------------------------

def create_access_token(user_id: int, role: str) -> str:
    """Create a signed access token carrying ``{id, role, iat, exp}``."""
    now = datetime.now(tz=timezone.utc)
    payload: dict[str, Any] = {
        "id": user_id,
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    logger.info("Issued access token for user id=%s role=%s", user_id, role)
    return token


def decode_token(token: str) -> dict:
    """
    Decode and verify a JWT.

    Raises:
        jose.JWTError: if the token is invalid or expired.
    """
    logger.trace("Decoding JWT token")
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


# ---------------------------------------------------------------------------
# Password reset tokens
# ---------------------------------------------------------------------------

def generate_reset_token() -> str:
    """Return 32 random bytes as a 64 character hex string."""
    return secrets.token_hex(32)


def reset_token_expiry_ms(now: Optional[datetime] = None) -> int:
    """Expiry for a token issued at *now*, as epoch milliseconds."""
    now = now or datetime.now(tz=timezone.utc)
    expires = now + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    return int(expires.timestamp() * 1000)


def now_ms() -> int:
    return int(datetime.now(tz=timezone.utc).timestamp() * 1000)
