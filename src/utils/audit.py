"""
Audit trail for administrative actions.

Adjustments, rate changes and manual payment transitions are recorded
alongside logins so money-affecting changes can be traced to a user.
"""

import logging
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.models.audit import AuditAction, AuditLog

logger = logging.getLogger(__name__)


async def log_action(
    db: AsyncSession,
    user_id: int,
    action: AuditAction,
    target_type: Optional[str] = None,
    target_id: Optional[int] = None,
    action_metadata: Optional[dict[str, Any]] = None,
    ip_address: Optional[str] = None,
) -> AuditLog:
    """
    Add an audit row to the session.

    Args:
        db: Database session
        user_id: Acting user
        action: What was done
        target_type: Kind of entity touched ("commission_record", "service_category", ...)
        target_id: Its id
        action_metadata: JSON-serializable details (amounts as strings)
        ip_address: Client IP address

    The caller commits.
    """
    entry = AuditLog(
        user_id=user_id,
        action=action,
        target_type=target_type,
        target_id=target_id,
        action_metadata=action_metadata,
        ip_address=ip_address,
    )
    db.add(entry)
    logger.debug(f"Audit: user {user_id} {action.value} {target_type or ''} {target_id or ''}")
    return entry


def get_client_ip(request) -> Optional[str]:
    """Client address, preferring the first X-Forwarded-For hop."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    if request.client:
        return request.client.host
    return None
