"""SQLAlchemy implementation of CouponRepository"""

from datetime import datetime
from typing import Optional
from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.coupon_repository import CouponRepository
from src.domain.coupon import Coupon


class SqlAlchemyCouponRepository(CouponRepository):
    """
    SQLAlchemy implementation of CouponRepository

    Features:
    - Unique upper-case codes
    - Store-side usage cap (current_uses < max_uses in the UPDATE predicate)
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_code(self, code: str) -> Optional[Coupon]:
        stmt = (
            select(Coupon)
            .where(Coupon.code == code)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, coupon_id: int) -> Optional[Coupon]:
        stmt = (
            select(Coupon)
            .where(Coupon.id == coupon_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, coupon: Coupon) -> Optional[Coupon]:
        try:
            async with self.session.begin_nested():
                self.session.add(coupon)
                await self.session.flush()
        except IntegrityError:
            return None

        await self.session.refresh(coupon)
        return coupon

    async def increment_uses(self, coupon_id: int, now: datetime) -> bool:
        """
        Count one redemption

        Returns:
            False when the cap was reached by a concurrent redemption
        """
        stmt = (
            update(Coupon)
            .where(Coupon.id == coupon_id)
            .where(or_(col(Coupon.max_uses).is_(None), Coupon.current_uses < Coupon.max_uses))
            .values(current_uses=Coupon.current_uses + 1, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def set_active(self, coupon_id: int, is_active: bool, now: datetime) -> Optional[Coupon]:
        stmt = (
            update(Coupon)
            .where(Coupon.id == coupon_id)
            .values(is_active=is_active, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self.get_by_id(coupon_id)
