"""ListAdminLogs Use Case"""

from libs.result import Result, Return
from src.app.errors import store_error
from src.app.repositories.admin_log_repository import AdminLogRepository
from .dtos import AdminLogListResponseDTO, ListAdminLogsQueryDTO, to_admin_log_dto


class ListAdminLogs:
    """Read the administrator audit trail, newest first"""

    def __init__(self, admin_log_repo: AdminLogRepository):
        self.admin_log_repo = admin_log_repo

    async def execute(self, query: ListAdminLogsQueryDTO) -> Result[AdminLogListResponseDTO]:
        try:
            logs = await self.admin_log_repo.list_recent(
                target_account_id=query.target_account_id,
                admin_id=query.admin_id,
                limit=query.limit,
                offset=query.offset,
            )
            return Return.ok(
                AdminLogListResponseDTO(
                    logs=[to_admin_log_dto(log) for log in logs],
                    limit=query.limit,
                    offset=query.offset,
                )
            )
        except Exception as e:
            return Return.err(store_error(e, "Failed to list admin logs"))
