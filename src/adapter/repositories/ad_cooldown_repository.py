"""SQLAlchemy implementation of AdCooldownRepository"""

from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.ad_cooldown_repository import AdCooldownRepository
from src.domain.ad_cooldown import AdCooldown


class SqlAlchemyAdCooldownRepository(AdCooldownRepository):
    """
    SQLAlchemy implementation of AdCooldownRepository

    The interval check is part of the UPDATE predicate: of two concurrent
    claims only one can move last_claim_at forward.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_account_id(self, account_id: str) -> Optional[AdCooldown]:
        stmt = (
            select(AdCooldown)
            .where(AdCooldown.account_id == account_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def try_claim(self, account_id: str, now: datetime, interval: timedelta) -> Optional[AdCooldown]:
        await self._ensure_row(account_id, now)

        threshold = now - interval
        stmt = (
            update(AdCooldown)
            .where(AdCooldown.account_id == account_id)
            .where(or_(
                col(AdCooldown.last_claim_at).is_(None),
                col(AdCooldown.last_claim_at) <= threshold,
            ))
            .values(last_claim_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self.get_by_account_id(account_id)

    async def _ensure_row(self, account_id: str, now: datetime) -> None:
        if await self.get_by_account_id(account_id):
            return
        try:
            async with self.session.begin_nested():
                self.session.add(AdCooldown(account_id=account_id, last_claim_at=None, updated_at=now))
                await self.session.flush()
        except IntegrityError:
            pass  # created concurrently
