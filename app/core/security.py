"""Security and Authentication Utilities"""

import secrets
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from app.config import settings
from app.utils.time import get_utc_now

# Bcrypt limit; longer passwords must be truncated
_BCRYPT_MAX_BYTES = 72

# 64 random bytes, URL-safe encoded
_REFRESH_TOKEN_BYTES = 64


def _truncate_password_for_bcrypt(password: str) -> bytes:
    """Truncate password to bcrypt's 72-byte limit, respecting UTF-8 boundaries."""
    encoded = password.encode("utf-8")
    if len(encoded) <= _BCRYPT_MAX_BYTES:
        return encoded
    truncated = encoded[:_BCRYPT_MAX_BYTES]
    while truncated:
        try:
            truncated.decode("utf-8")
            return truncated
        except UnicodeDecodeError:
            truncated = truncated[:-1]
    return b""


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Hashed password (ASCII string for DB storage)
    """
    pwd_bytes = _truncate_password_for_bcrypt(password)
    hashed = bcrypt.hashpw(pwd_bytes, bcrypt.gensalt())
    return hashed.decode("ascii")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its bcrypt hash."""
    pwd_bytes = _truncate_password_for_bcrypt(plain_password)
    hash_bytes = hashed_password.encode("ascii") if isinstance(hashed_password, str) else hashed_password
    return bcrypt.checkpw(pwd_bytes, hash_bytes)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a short-lived JWT access token.

    Args:
        data: Claims to encode (``sub`` carries the user id)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    to_encode = data.copy()

    if expires_delta:
        expire = get_utc_now() + expires_delta
    else:
        expire = get_utc_now() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({
        "exp": expire,
        "type": "access",
        "jti": secrets.token_hex(16),
    })
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """
    Decode and validate a JWT token.

    Returns:
        Decoded token payload or None if invalid or expired
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


def generate_refresh_token() -> str:
    """Opaque refresh token; the server-side row is the source of truth."""
    return secrets.token_urlsafe(_REFRESH_TOKEN_BYTES)


def refresh_token_expiry(issued_at: Optional[datetime] = None) -> datetime:
    issued_at = issued_at or get_utc_now()
    return issued_at + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
