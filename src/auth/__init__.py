"""Authentication module."""

from src.auth.dependencies import (
    ensure_salesperson_access,
    get_current_user,
    require_admin,
    require_salesperson_or_admin,
)
from src.auth.jwt import create_access_token, verify_token

__all__ = [
    "create_access_token",
    "verify_token",
    "get_current_user",
    "require_admin",
    "require_salesperson_or_admin",
    "ensure_salesperson_access",
]
