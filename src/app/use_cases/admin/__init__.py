from .audit import SYSTEM_ADMIN_ID, record_admin_action
from .list_admin_logs import ListAdminLogs
from .dtos import (
    ListAdminLogsQueryDTO,
    AdminLogResponseDTO,
    AdminLogListResponseDTO,
)

__all__ = [
    "SYSTEM_ADMIN_ID",
    "record_admin_action",
    "ListAdminLogs",
    "ListAdminLogsQueryDTO",
    "AdminLogResponseDTO",
    "AdminLogListResponseDTO",
]
