"""Admin Log Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.admin_log import AdminLog


class AdminLogRepository(ABC):
    """Append-only audit trail of administrator operations"""

    @abstractmethod
    async def create(self, admin_log: AdminLog) -> AdminLog:
        pass

    @abstractmethod
    async def list_recent(
        self,
        target_account_id: Optional[str] = None,
        admin_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[AdminLog]:
        """
        List audit records, newest first

        Args:
            target_account_id: Only records aimed at this account
            admin_id: Only records written by this administrator
        """
        pass
