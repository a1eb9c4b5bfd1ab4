"""Unit tests for ChargeAction use case

Tests cover:
- ALC-funded actions
- Quota-funded actions when the balance is too low
- QUOTA_EXCEEDED when neither covers the action
- A debit lost to a concurrent spend falling back to the quota
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.errors import ErrorCode, InsufficientBalanceError
from src.app.use_cases.quota import ActionType, ChargeAction, ChargeActionCommandDTO
from src.app.use_cases.quota.charge_action import describe_action
from src.domain.alc_transaction import TransactionType
from tests.fixtures.factories import NOW, make_posting, make_subscription, make_wallet


@pytest.fixture
def mock_ledger(frozen_clock):
    ledger = MagicMock()
    ledger.clock = frozen_clock
    ledger.post = AsyncMock()
    return ledger


@pytest.fixture
def mock_subscription_repo():
    repo = MagicMock()
    repo.get_or_create = AsyncMock(return_value=make_subscription(questions_today=3))
    repo.get_by_account_id = AsyncMock(return_value=make_subscription(questions_today=3))
    repo.record_question = AsyncMock(return_value=make_subscription(questions_today=4))
    return repo


@pytest.fixture
def charge_use_case(mock_uow, mock_ledger, mock_subscription_repo, mock_notifier):
    return ChargeAction(mock_uow, mock_ledger, mock_subscription_repo, notifier=mock_notifier)


@pytest.mark.asyncio
class TestChargeAction:

    async def test_debits_when_balance_covers_cost(
        self, charge_use_case, mock_uow, mock_ledger, mock_subscription_repo, mock_notifier
    ):
        """
        Given: Balance 100, image costs 25
        When: An image action is charged
        Then: 25 ALC debited, one question recorded, funded by alc
        """
        # Arrange
        mock_ledger.get_wallet = AsyncMock(return_value=make_wallet(100))
        mock_ledger.post = AsyncMock(return_value=make_posting(-25, 75, TransactionType.USAGE))

        # Act
        result = await charge_use_case.execute(ChargeActionCommandDTO(
            account_id="acc_123", action=ActionType.IMAGE, content="a lighthouse at dusk"
        ))

        # Assert
        assert result.is_ok()
        response = result.value
        assert response.funded_by == "alc"
        assert response.cost == 25
        assert response.balance == 75
        assert response.transaction.amount == -25
        assert response.quota.questions_today == 4

        kwargs = mock_ledger.post.call_args.kwargs
        assert kwargs["amount"] == -25
        assert kwargs["transaction_type"] == TransactionType.USAGE
        assert kwargs["description"] == "image: a lighthouse at dusk..."
        mock_subscription_repo.get_by_account_id.assert_called_once_with("acc_123", for_update=True)
        mock_subscription_repo.record_question.assert_called_once_with("acc_123", NOW.date(), NOW)
        mock_uow.commit.assert_called_once()
        # wallet, transaction, subscription
        assert mock_notifier.publish.call_count == 3

    async def test_quota_covers_action_when_balance_low(
        self, charge_use_case, mock_uow, mock_ledger, mock_subscription_repo
    ):
        """
        Given: Balance 10, code costs 45, 3 of 25 questions used
        When: A code action is charged
        Then: Nothing debited, question recorded, funded by quota
        """
        # Arrange
        mock_ledger.get_wallet = AsyncMock(return_value=make_wallet(10))

        # Act
        result = await charge_use_case.execute(ChargeActionCommandDTO(account_id="acc_123", action=ActionType.CODE))

        # Assert
        assert result.is_ok()
        assert result.value.funded_by == "quota"
        assert result.value.cost == 0
        assert result.value.balance == 10
        assert result.value.transaction is None
        mock_ledger.post.assert_not_called()
        mock_subscription_repo.record_question.assert_called_once()
        mock_uow.commit.assert_called_once()

    async def test_quota_exceeded(self, charge_use_case, mock_uow, mock_ledger, mock_subscription_repo):
        """
        Given: Balance 10 and 25 of 25 questions used
        When: A video action is charged
        Then: QUOTA_EXCEEDED, nothing recorded
        """
        # Arrange
        mock_ledger.get_wallet = AsyncMock(return_value=make_wallet(10))
        mock_subscription_repo.get_by_account_id = AsyncMock(return_value=make_subscription(questions_today=25))

        # Act
        result = await charge_use_case.execute(ChargeActionCommandDTO(account_id="acc_123", action=ActionType.VIDEO))

        # Assert
        assert result.is_err()
        assert result.error.code == ErrorCode.QUOTA_EXCEEDED
        mock_subscription_repo.record_question.assert_not_called()
        mock_uow.commit.assert_not_called()
        mock_uow.rollback.assert_called_once()

    async def test_lost_debit_race_falls_back_to_quota(self, charge_use_case, mock_ledger):
        # Arrange
        mock_ledger.get_wallet = AsyncMock(return_value=make_wallet(5))
        mock_ledger.post = AsyncMock(side_effect=InsufficientBalanceError("Insufficient balance"))

        # Act
        result = await charge_use_case.execute(ChargeActionCommandDTO(account_id="acc_123", action=ActionType.CHAT))

        # Assert
        assert result.is_ok()
        assert result.value.funded_by == "quota"
        mock_ledger.post.assert_called_once()


class TestDescribeAction:

    def test_truncates_content(self):
        assert describe_action(ActionType.CHAT, "x" * 100) == f"chat: {'x' * 40}..."

    def test_without_content(self):
        assert describe_action(ActionType.VIDEO, None) == "video"
