"""SQLAlchemy implementation of AdminLogRepository"""

from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.admin_log_repository import AdminLogRepository
from src.domain.admin_log import AdminLog


class SqlAlchemyAdminLogRepository(AdminLogRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, admin_log: AdminLog) -> AdminLog:
        self.session.add(admin_log)
        await self.session.flush()
        await self.session.refresh(admin_log)
        return admin_log

    async def list_recent(
        self,
        target_account_id: Optional[str] = None,
        admin_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[AdminLog]:
        stmt = select(AdminLog)
        if target_account_id is not None:
            stmt = stmt.where(AdminLog.target_account_id == target_account_id)
        if admin_id is not None:
            stmt = stmt.where(AdminLog.admin_id == admin_id)
        stmt = stmt.order_by(AdminLog.created_at.desc(), AdminLog.id.desc()).limit(limit).offset(offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
