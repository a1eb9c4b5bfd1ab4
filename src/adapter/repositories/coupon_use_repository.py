"""SQLAlchemy implementation of CouponUseRepository"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.coupon_use_repository import CouponUseRepository
from src.domain.coupon_use import CouponUse


class SqlAlchemyCouponUseRepository(CouponUseRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, coupon_id: int, account_id: str) -> Optional[CouponUse]:
        stmt = (
            select(CouponUse)
            .where(CouponUse.coupon_id == coupon_id, CouponUse.account_id == account_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, coupon_use: CouponUse) -> Optional[CouponUse]:
        """
        Insert the redemption row inside a savepoint

        Returns:
            None when the unique (coupon_id, account_id) constraint rejects it
        """
        try:
            async with self.session.begin_nested():
                self.session.add(coupon_use)
                await self.session.flush()
        except IntegrityError:
            return None

        await self.session.refresh(coupon_use)
        return coupon_use

    async def mark_credited(self, coupon_use_id: int, transaction_id: int, now: datetime) -> None:
        stmt = (
            update(CouponUse)
            .where(CouponUse.id == coupon_use_id)
            .values(transaction_id=transaction_id, credited_at=now)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def list_uncredited(self, limit: int = 100) -> List[CouponUse]:
        stmt = (
            select(CouponUse)
            .where(col(CouponUse.transaction_id).is_(None))
            .order_by(CouponUse.created_at, CouponUse.id)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
