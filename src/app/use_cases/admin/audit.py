"""Admin audit trail helper shared by the administrator use cases"""

from datetime import datetime
from typing import Any, Dict, Optional
from src.app.repositories.admin_log_repository import AdminLogRepository
from src.domain.admin_log import AdminAction, AdminLog

SYSTEM_ADMIN_ID = "system"


async def record_admin_action(
    admin_log_repo: Optional[AdminLogRepository],
    admin_id: Optional[str],
    action: AdminAction,
    now: datetime,
    target_account_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> Optional[AdminLog]:
    """
    Append an audit record inside the caller's unit of work

    Must run before the caller commits so the record and the operation
    land together. Does nothing when no repository is wired.
    """
    if admin_log_repo is None:
        return None
    return await admin_log_repo.create(
        AdminLog(
            admin_id=admin_id or SYSTEM_ADMIN_ID,
            action=action,
            target_account_id=target_account_id,
            details=details,
            created_at=now,
        )
    )
