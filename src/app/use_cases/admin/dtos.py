"""Data Transfer Objects for the admin audit log"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from src.domain.admin_log import AdminAction, AdminLog


class ListAdminLogsQueryDTO(BaseModel):
    target_account_id: Optional[str] = None
    admin_id: Optional[str] = None
    limit: int = Field(default=50, ge=1, le=200)
    offset: int = Field(default=0, ge=0)


class AdminLogResponseDTO(BaseModel):
    admin_log_id: int
    admin_id: str
    action: AdminAction
    target_account_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    created_at: datetime


class AdminLogListResponseDTO(BaseModel):
    logs: List[AdminLogResponseDTO]
    limit: int
    offset: int


def to_admin_log_dto(admin_log: AdminLog) -> AdminLogResponseDTO:
    return AdminLogResponseDTO(
        admin_log_id=admin_log.id,
        admin_id=admin_log.admin_id,
        action=admin_log.action,
        target_account_id=admin_log.target_account_id,
        details=admin_log.details,
        created_at=admin_log.created_at,
    )
