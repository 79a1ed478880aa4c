# hoa_portal/utils/security.py
"""
Credential helpers: JWT encode/decode, password hashing, temporary passwords.
"""

import secrets
import string
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from hoa_portal.config import Settings
from hoa_portal.exceptions import Unauthorized

_PASSWORD_ALPHABET = string.ascii_letters + string.digits + "!@#$%^&*"


def decode_token(token: str, settings: Settings) -> Dict[str, Any]:
    """Verify signature, expiry and audience; return the claims."""
    options = {"verify_aud": settings.JWT_AUDIENCE is not None}
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            options=options,
        )
    except ExpiredSignatureError:
        raise Unauthorized("Unauthorized: Token has expired")
    except JWTError:
        raise Unauthorized("Unauthorized: Invalid token")


def create_access_token(
    subject: str,
    role: str,
    settings: Settings,
    tenant_id: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Mint a token in the shape decode_token() expects. Used by tests and dev scripts."""
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.DEV_TOKEN_EXPIRE_MINUTES))
    claims = {
        "sub": subject,
        "exp": expire,
        "app_metadata": {"role": role, "tenant_id": tenant_id},
    }
    if settings.JWT_AUDIENCE:
        claims["aud"] = settings.JWT_AUDIENCE
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def hash_password(password: str, rounds: int = 12) -> str:
    # Bcrypt has a 72 byte limit
    password_bytes = password.encode("utf-8")[:72]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    password_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))


def generate_temporary_password(length: int = 16) -> str:
    """Random password with at least one lower, upper, digit and symbol."""
    length = max(length, 8)
    while True:
        password = "".join(secrets.choice(_PASSWORD_ALPHABET) for _ in range(length))
        if (any(c.islower() for c in password)
                and any(c.isupper() for c in password)
                and any(c.isdigit() for c in password)
                and any(not c.isalnum() for c in password)):
            return password
