"""Integration tests for the daily question quota against SQLite

Tests cover:
- canAct flips exactly at the plan limit
- Lazy day rollover
- Plan changes, unlimited plans and expiry
- ChargeAction funding from ALC or quota
"""

import pytest
from datetime import timedelta

from src.adapter.repositories.subscription_repository import SqlAlchemySubscriptionRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.errors import ErrorCode
from src.app.use_cases.quota import (
    ActionType,
    ChangePlan,
    ChangePlanCommandDTO,
    ChargeAction,
    ChargeActionCommandDTO,
    CheckQuota,
    RecordQuestion,
)
from src.depends import build_wallet_ledger
from src.domain.subscription import SubscriptionPlan


async def check(session_factory, clock, account_id):
    async with session_factory() as session:
        use_case = CheckQuota(SqlAlchemyUnitOfWork(session), SqlAlchemySubscriptionRepository(session), clock)
        return await use_case.execute(account_id)


async def record(session_factory, clock, account_id, times=1):
    result = None
    for _ in range(times):
        async with session_factory() as session:
            use_case = RecordQuestion(
                SqlAlchemyUnitOfWork(session), SqlAlchemySubscriptionRepository(session), clock
            )
            result = await use_case.execute(account_id)
    return result


async def change_plan(session_factory, clock, account_id, plan, expires_at=None):
    async with session_factory() as session:
        use_case = ChangePlan(SqlAlchemyUnitOfWork(session), SqlAlchemySubscriptionRepository(session), clock)
        return await use_case.execute(ChangePlanCommandDTO(account_id=account_id, plan=plan, expires_at=expires_at))


async def charge(session_factory, clock, account_id, action):
    async with session_factory() as session:
        use_case = ChargeAction(
            SqlAlchemyUnitOfWork(session),
            build_wallet_ledger(session, clock),
            SqlAlchemySubscriptionRepository(session),
        )
        return await use_case.execute(ChargeActionCommandDTO(account_id=account_id, action=action))


@pytest.mark.asyncio
class TestQuotaStore:

    async def test_can_act_until_limit(self, session_factory, frozen_clock):
        """
        Given: Free plan (25 questions per day)
        When: 24 then 25 questions are recorded
        Then: canAct is true after 24 and false after 25
        """
        # Act
        after_24 = await record(session_factory, frozen_clock, "acc_q1", times=24)
        after_25 = await record(session_factory, frozen_clock, "acc_q1")

        # Assert
        assert after_24.value.can_act is True
        assert after_25.value.questions_today == 25
        assert after_25.value.can_act is False
        assert (await check(session_factory, frozen_clock, "acc_q1")).value.remaining == 0

    async def test_day_boundary_resets_count(self, session_factory, frozen_clock):
        """
        Given: Limit reached at 23:59:30
        When: The clock passes midnight
        Then: Count reads 0 before the next write, then restarts at 1
        """
        # Arrange
        frozen_clock.set(frozen_clock.now().replace(hour=23, minute=59, second=30))
        await record(session_factory, frozen_clock, "acc_q2", times=25)

        # Act
        frozen_clock.advance(seconds=45)
        status = await check(session_factory, frozen_clock, "acc_q2")
        recorded = await record(session_factory, frozen_clock, "acc_q2")

        # Assert
        assert status.value.questions_today == 0
        assert status.value.can_act is True
        assert recorded.value.questions_today == 1
        assert recorded.value.day == frozen_clock.today()

    async def test_plan_change_keeps_todays_count(self, session_factory, frozen_clock):
        # Arrange
        await record(session_factory, frozen_clock, "acc_q3", times=25)

        # Act
        upgraded = await change_plan(session_factory, frozen_clock, "acc_q3", SubscriptionPlan.PLUS)
        downgraded = await change_plan(session_factory, frozen_clock, "acc_q3", SubscriptionPlan.FREE)

        # Assert
        assert upgraded.value.questions_today == 25
        assert upgraded.value.remaining == 75
        assert upgraded.value.can_act is True
        assert downgraded.value.can_act is False

    async def test_unlimited_plan_until_expiry(self, session_factory, frozen_clock):
        """
        Given: Premium plan expiring in one hour, 30 questions today
        When: canAct is checked before and after expiry
        Then: True while premium, false once it falls back to free
        """
        # Arrange
        expires_at = frozen_clock.now() + timedelta(hours=1)
        await change_plan(session_factory, frozen_clock, "acc_q4", SubscriptionPlan.PREMIUM, expires_at)
        await record(session_factory, frozen_clock, "acc_q4", times=30)

        # Act
        before = await check(session_factory, frozen_clock, "acc_q4")
        frozen_clock.advance(hours=2)
        after = await check(session_factory, frozen_clock, "acc_q4")

        # Assert
        assert before.value.unlimited is True
        assert before.value.can_act is True
        assert after.value.plan == SubscriptionPlan.PREMIUM
        assert after.value.effective_plan == SubscriptionPlan.FREE
        assert after.value.can_act is False


@pytest.mark.asyncio
class TestChargeActionStore:

    async def test_funding_sources(self, session_factory, frozen_clock, ledger_state):
        """
        Given: Welcome wallet of 50 ALC
        When: A video (75) and then an image (25) are charged
        Then: The video rides on the quota, the image is paid in ALC
        """
        # Act
        video = await charge(session_factory, frozen_clock, "acc_c1", ActionType.VIDEO)
        image = await charge(session_factory, frozen_clock, "acc_c1", ActionType.IMAGE)

        # Assert
        assert video.value.funded_by == "quota"
        assert image.value.funded_by == "alc"
        assert image.value.balance == 25
        assert image.value.quota.questions_today == 2
        wallet, transactions = await ledger_state("acc_c1")
        assert wallet.balance == 25
        assert [t.amount for t in transactions] == [-25]

    async def test_quota_exceeded_changes_nothing(self, session_factory, frozen_clock, ledger_state):
        # Arrange
        await record(session_factory, frozen_clock, "acc_c2", times=25)

        # Act
        result = await charge(session_factory, frozen_clock, "acc_c2", ActionType.VIDEO)

        # Assert
        assert result.error.code == ErrorCode.QUOTA_EXCEEDED
        assert (await check(session_factory, frozen_clock, "acc_c2")).value.questions_today == 25
        wallet, transactions = await ledger_state("acc_c2")
        assert wallet is None
        assert transactions == []
