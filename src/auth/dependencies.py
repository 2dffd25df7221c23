"""
FastAPI dependencies for authentication and role checks.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.jwt import get_token_from_cookie, verify_token
from src.db import get_db
from src.models import Salesperson, User, UserRole
from src.services.commission_store import CommissionStore


async def _load_active_user(db: AsyncSession, payload: Optional[dict]) -> Optional[User]:
    if not payload:
        return None
    user = await db.get(User, payload["user_id"])
    if user is None or not user.is_active:
        return None
    return user


async def get_current_user_optional(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Current user from the JWT cookie, or None when anonymous."""
    token = get_token_from_cookie(request)
    if not token:
        return None
    return await _load_active_user(db, verify_token(token))


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Get current authenticated user.

    Raises 401 if not authenticated, 403 if the account is disabled.
    """
    token = get_token_from_cookie(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    payload = verify_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    user = await db.get(User, payload["user_id"])
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )

    return user


async def require_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    """Raises 403 unless the current user is an administrator."""
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


async def require_salesperson_or_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Salespeople see their own commission data; admins see everything.
    """
    if current_user.role not in (UserRole.ADMIN, UserRole.SALESPERSON):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )
    return current_user


async def get_own_salesperson(db: AsyncSession, user: User) -> Optional[Salesperson]:
    """Salesperson profile linked to a user account, if any."""
    return await CommissionStore(db).get_salesperson_by_user(user.id)


async def ensure_salesperson_access(
    db: AsyncSession,
    user: User,
    salesperson_id: int,
) -> None:
    """
    Raise 403 unless the user is an admin or owns the salesperson profile.
    """
    if user.role == UserRole.ADMIN:
        return

    own = await get_own_salesperson(db, user)
    if own is None or own.id != salesperson_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )
