"""
JWT token management.

Tokens travel in an httpOnly cookie named access_token.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from src.config import settings
from src.models.user import UserRole

# JWT configuration
ALGORITHM = "HS256"
TOKEN_TYPE = "access"
COOKIE_NAME = "access_token"
ROLE_VALUES = frozenset(r.value for r in UserRole)


def create_access_token(
    user_id: int,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        user_id: User's database ID
        role: User role value (admin, salesperson, ...)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(hours=settings.jwt_expire_hours)

    payload = {
        "sub": str(user_id),
        "role": role,
        "exp": issued_at + lifetime,
        "type": TOKEN_TYPE,
        "iat": issued_at,
    }

    return jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """
    Decode an access token.

    Returns:
        {"user_id": int, "role": str}, or None for an expired, forged,
        non-access or unknown-role token
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None

    if payload.get("type") != TOKEN_TYPE:
        return None

    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or role not in ROLE_VALUES:
        return None

    return {"user_id": int(user_id), "role": role}


def get_token_from_cookie(request) -> Optional[str]:
    """Access token from the request cookie, if present."""
    return request.cookies.get(COOKIE_NAME)
