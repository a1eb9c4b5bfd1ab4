"""SQLAlchemy implementation of DailyLimitRepository"""

from datetime import date, datetime
from typing import Optional
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.daily_limit_repository import DailyLimitRepository
from src.domain.daily_limit import DailyLimit


class SqlAlchemyDailyLimitRepository(DailyLimitRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, account_id: str, day: date) -> Optional[DailyLimit]:
        stmt = (
            select(DailyLimit)
            .where(DailyLimit.account_id == account_id, DailyLimit.day == day)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def increment_ads_watched(
        self,
        account_id: str,
        day: date,
        daily_cap: int,
        now: datetime,
    ) -> Optional[DailyLimit]:
        await self._ensure_row(account_id, day, now)

        stmt = (
            update(DailyLimit)
            .where(DailyLimit.account_id == account_id)
            .where(DailyLimit.day == day)
            .where(DailyLimit.ads_watched < daily_cap)
            .values(ads_watched=DailyLimit.ads_watched + 1, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self.get(account_id, day)

    async def _ensure_row(self, account_id: str, day: date, now: datetime) -> None:
        if await self.get(account_id, day):
            return
        try:
            async with self.session.begin_nested():
                self.session.add(DailyLimit(account_id=account_id, day=day, ads_watched=0, updated_at=now))
                await self.session.flush()
        except IntegrityError:
            pass  # created concurrently
