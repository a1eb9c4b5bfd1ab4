"""Unit tests for subscription quota rules

Tests cover:
- Day rollover of the question counter
- Expired paid plans falling back to free
- Unlimited plans
- canAct evaluation
"""

from datetime import date, datetime, timedelta

from src.domain.subscription import (
    DEFAULT_PLAN_QUESTION_LIMITS,
    Subscription,
    SubscriptionPlan,
    can_act,
    question_limit_for,
)

NOW = datetime(2026, 3, 10, 12, 0, 0)
TODAY = NOW.date()


def make_subscription(plan=SubscriptionPlan.FREE, questions_today=0, questions_limit=25,
                      last_question_reset=TODAY, expires_at=None):
    return Subscription(
        id=1,
        account_id="acc_123",
        plan=plan,
        questions_today=questions_today,
        questions_limit=questions_limit,
        last_question_reset=last_question_reset,
        expires_at=expires_at,
        created_at=NOW,
        updated_at=NOW,
    )


class TestQuestionsUsed:

    def test_counter_of_today_is_used(self):
        subscription = make_subscription(questions_today=7)
        assert subscription.questions_used_on(TODAY) == 7

    def test_counter_of_previous_day_reads_zero(self):
        """
        Given: Counter stamped with yesterday
        When: Questions used today are read
        Then: 0, without any write
        """
        subscription = make_subscription(questions_today=25, last_question_reset=TODAY - timedelta(days=1))
        assert subscription.questions_used_on(TODAY) == 0
        assert subscription.questions_today == 25


class TestEffectivePlan:

    def test_paid_plan_without_expiry(self):
        subscription = make_subscription(plan=SubscriptionPlan.PLUS, questions_limit=100)
        assert subscription.effective_plan(NOW) == SubscriptionPlan.PLUS

    def test_expired_paid_plan_counts_as_free(self):
        subscription = make_subscription(
            plan=SubscriptionPlan.PREMIUM, questions_limit=0, expires_at=NOW - timedelta(seconds=1)
        )
        assert subscription.effective_plan(NOW) == SubscriptionPlan.FREE

    def test_plan_expiring_later_still_applies(self):
        subscription = make_subscription(
            plan=SubscriptionPlan.VIP, questions_limit=0, expires_at=NOW + timedelta(days=30)
        )
        assert subscription.effective_plan(NOW) == SubscriptionPlan.VIP

    def test_plans_are_ranked(self):
        assert SubscriptionPlan.FREE.rank < SubscriptionPlan.PLUS.rank < SubscriptionPlan.PREMIUM.rank
        assert SubscriptionPlan.PREMIUM.rank < SubscriptionPlan.VIP.rank


class TestCanAct:

    def test_free_plan_below_limit(self):
        subscription = make_subscription(questions_today=24)
        assert can_act(subscription, NOW, TODAY, DEFAULT_PLAN_QUESTION_LIMITS)

    def test_free_plan_at_limit(self):
        """
        Given: Free plan with 25 of 25 questions used today
        When: canAct is evaluated
        Then: False
        """
        subscription = make_subscription(questions_today=25)
        assert not can_act(subscription, NOW, TODAY, DEFAULT_PLAN_QUESTION_LIMITS)

    def test_exhausted_counter_from_yesterday_allows_action(self):
        subscription = make_subscription(questions_today=25, last_question_reset=TODAY - timedelta(days=1))
        assert can_act(subscription, NOW, TODAY, DEFAULT_PLAN_QUESTION_LIMITS)

    def test_unlimited_plan_always_acts(self):
        subscription = make_subscription(plan=SubscriptionPlan.PREMIUM, questions_today=10_000, questions_limit=0)
        assert question_limit_for(subscription, NOW, DEFAULT_PLAN_QUESTION_LIMITS) is None
        assert can_act(subscription, NOW, TODAY, DEFAULT_PLAN_QUESTION_LIMITS)

    def test_expired_unlimited_plan_uses_free_limit(self):
        """
        Given: Premium plan expired yesterday, 30 questions today
        When: canAct is evaluated
        Then: Free limit of 25 applies, so False
        """
        subscription = make_subscription(
            plan=SubscriptionPlan.PREMIUM,
            questions_today=30,
            questions_limit=0,
            expires_at=NOW - timedelta(days=1),
        )
        assert question_limit_for(subscription, NOW, DEFAULT_PLAN_QUESTION_LIMITS) == 25
        assert not can_act(subscription, NOW, TODAY, DEFAULT_PLAN_QUESTION_LIMITS)

    def test_stored_limit_applies_to_limited_plan(self):
        subscription = make_subscription(plan=SubscriptionPlan.PLUS, questions_today=99, questions_limit=100)
        assert question_limit_for(subscription, NOW, DEFAULT_PLAN_QUESTION_LIMITS) == 100
        assert can_act(subscription, NOW, TODAY, DEFAULT_PLAN_QUESTION_LIMITS)

    def test_custom_plan_table(self):
        subscription = make_subscription(questions_today=3, questions_limit=3)
        limits = {**DEFAULT_PLAN_QUESTION_LIMITS, "free": 3}
        assert not can_act(subscription, NOW, TODAY, limits)


def test_date_type_of_reset_column():
    subscription = make_subscription()
    assert isinstance(subscription.last_question_reset, date)
