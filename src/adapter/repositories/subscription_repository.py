"""SQLAlchemy implementation of SubscriptionRepository"""

from datetime import date, datetime
from typing import Optional
from sqlalchemy import case, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.subscription import Subscription, SubscriptionPlan


class SqlAlchemySubscriptionRepository(SubscriptionRepository):
    """
    SQLAlchemy implementation of SubscriptionRepository

    The daily counter rolls over inside the UPDATE itself, so two questions
    recorded concurrently across midnight both land on the new day.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_account_id(self, account_id: str, for_update: bool = False) -> Optional[Subscription]:
        stmt = (
            select(Subscription)
            .where(Subscription.account_id == account_id)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create(
        self,
        account_id: str,
        plan: SubscriptionPlan,
        questions_limit: int,
        today: date,
    ) -> Subscription:
        subscription = await self.get_by_account_id(account_id)
        if subscription:
            return subscription

        subscription = Subscription(
            account_id=account_id,
            plan=plan,
            questions_today=0,
            questions_limit=questions_limit,
            last_question_reset=today,
        )
        try:
            async with self.session.begin_nested():
                self.session.add(subscription)
                await self.session.flush()
        except IntegrityError:
            return await self.get_by_account_id(account_id)

        await self.session.refresh(subscription)
        return subscription

    async def record_question(self, account_id: str, today: date, now: datetime) -> Optional[Subscription]:
        stmt = (
            update(Subscription)
            .where(Subscription.account_id == account_id)
            .values(
                questions_today=case(
                    (Subscription.last_question_reset == today, Subscription.questions_today + 1),
                    else_=1,
                ),
                last_question_reset=today,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self.get_by_account_id(account_id)

    async def update_plan(
        self,
        account_id: str,
        plan: SubscriptionPlan,
        questions_limit: int,
        expires_at: Optional[datetime],
        now: datetime,
    ) -> Optional[Subscription]:
        stmt = (
            update(Subscription)
            .where(Subscription.account_id == account_id)
            .values(
                plan=plan,
                questions_limit=questions_limit,
                expires_at=expires_at,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self.get_by_account_id(account_id)
