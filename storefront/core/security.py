# storefront/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import jwt, JWTError

from storefront.core.config import Settings
from storefront.core.errors import AuthError


def hash_password(password: str, rounds: int = 12) -> str:
    """
    One-way, salted bcrypt hash of a plaintext password.

    bcrypt only looks at the first 72 bytes; longer inputs are truncated
    explicitly so newer bcrypt releases don't reject them.
    """
    hashed = bcrypt.hashpw(password.encode("utf-8")[:72], bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(
            password.encode("utf-8")[:72],
            password_hash.encode("utf-8"),
        )
    except ValueError:
        # malformed stored hash
        return False


def create_access_token(
    user_id: int,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Issue a signed JWT bound to `user_id`.

    Claims:
      - sub: user id as string
      - iat: issue time
      - exp: now + ACCESS_TOKEN_EXPIRE_MINUTES (or expires_delta)
    """
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    claims = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_access_token(token: str, settings: Settings) -> dict[str, Any]:
    """
    Decode and verify an access token.

    Verification:
      - signature (JWT_ALG using JWT_SECRET)
      - expiration time (exp)

    Raises:
        AuthError: if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
        )
    except JWTError:
        raise AuthError("Invalid or expired token")
