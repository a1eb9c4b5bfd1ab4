"""Unit tests for wallet use cases

Tests cover:
- CreditWallet: success, invalid amount, idempotent replay, store failure
- DebitWallet: success, insufficient balance
- AdjustBalance: admin credit/debit kinds
- GetWallet / ListTransactions
- Store timeout handling, slow change notifiers
- Admin audit log entries for adjustments
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.errors import ErrorCode, InsufficientBalanceError
from src.app.use_cases.wallet import (
    AdjustBalance,
    AdjustBalanceCommandDTO,
    CreditCommandDTO,
    CreditWallet,
    DebitCommandDTO,
    DebitWallet,
    GetWallet,
    ListTransactions,
    ListTransactionsQueryDTO,
)
from src.domain.admin_log import AdminAction
from src.domain.alc_transaction import PaymentMethod, TransactionStatus, TransactionType
from tests.fixtures.factories import make_posting, make_transaction, make_wallet


@pytest.fixture
def mock_ledger(frozen_clock):
    """Mock wallet ledger"""
    ledger = MagicMock()
    ledger.clock = frozen_clock
    return ledger


@pytest.mark.asyncio
class TestCreditWallet:

    async def test_credit_success(self, mock_uow, mock_ledger, mock_notifier):
        """
        Given: Wallet with 50 ALC
        When: 500 ALC purchase is credited
        Then: Transaction returned, unit of work committed, changes published
        """
        # Arrange
        mock_ledger.post = AsyncMock(return_value=make_posting(
            500, 550, TransactionType.PURCHASE,
            payment_method=PaymentMethod.MONCASH, external_reference="MC-77812",
        ))
        use_case = CreditWallet(mock_uow, mock_ledger, notifier=mock_notifier)
        command = CreditCommandDTO(
            account_id="acc_123",
            amount=500,
            payment_method=PaymentMethod.MONCASH,
            external_reference="MC-77812",
            idempotency_key="purchase:MC-77812",
        )

        # Act
        result = await use_case.execute(command)

        # Assert
        assert result.is_ok()
        assert result.value.amount == 500
        assert result.value.balance_after == 550
        assert result.value.transaction_type == "purchase"
        assert result.value.payment_method == "moncash"
        assert result.value.status == "auto_approved"

        kwargs = mock_ledger.post.call_args.kwargs
        assert kwargs["amount"] == 500
        assert kwargs["transaction_type"] == TransactionType.PURCHASE
        assert kwargs["idempotency_key"] == "purchase:MC-77812"
        mock_uow.commit.assert_called_once()
        assert mock_notifier.publish.call_count == 2

    @pytest.mark.parametrize("amount", [0, -10])
    async def test_non_positive_amount_rejected(self, mock_uow, mock_ledger, amount):
        # Arrange
        mock_ledger.post = AsyncMock()
        use_case = CreditWallet(mock_uow, mock_ledger)

        # Act
        result = await use_case.execute(CreditCommandDTO(account_id="acc_123", amount=amount))

        # Assert
        assert result.is_err()
        assert result.error.code == ErrorCode.INVALID_AMOUNT
        mock_ledger.post.assert_not_called()
        mock_uow.commit.assert_not_called()
        mock_uow.rollback.assert_called_once()

    async def test_replay_publishes_nothing(self, mock_uow, mock_ledger, mock_notifier):
        """
        Given: The idempotency key was already used
        When: The credit is retried
        Then: Original transaction returned, no change events
        """
        # Arrange
        mock_ledger.post = AsyncMock(return_value=make_posting(500, 550, replayed=True))
        use_case = CreditWallet(mock_uow, mock_ledger, notifier=mock_notifier)

        # Act
        result = await use_case.execute(
            CreditCommandDTO(account_id="acc_123", amount=500, idempotency_key="purchase:MC-1")
        )

        # Assert
        assert result.is_ok()
        assert result.value.balance_after == 550
        mock_notifier.publish.assert_not_called()

    async def test_store_failure_returns_store_error(self, mock_uow, mock_ledger):
        # Arrange
        mock_ledger.post = AsyncMock(side_effect=RuntimeError("database is locked"))
        use_case = CreditWallet(mock_uow, mock_ledger)

        # Act
        result = await use_case.execute(CreditCommandDTO(account_id="acc_123", amount=10))

        # Assert
        assert result.is_err()
        assert result.error.code == ErrorCode.STORE_ERROR
        assert result.error.reason == "database is locked"
        mock_uow.rollback.assert_called_once()

    async def test_notifier_failure_does_not_fail_credit(self, mock_uow, mock_ledger):
        # Arrange
        notifier = MagicMock()
        notifier.publish = AsyncMock(side_effect=RuntimeError("feed closed"))
        mock_ledger.post = AsyncMock(return_value=make_posting(10, 60))
        use_case = CreditWallet(mock_uow, mock_ledger, notifier=notifier)

        # Act
        result = await use_case.execute(CreditCommandDTO(account_id="acc_123", amount=10))

        # Assert
        assert result.is_ok()
        mock_uow.commit.assert_called_once()

    async def test_timeout_rolls_back(self, mock_uow, mock_ledger):
        """
        Given: The store does not answer within the timeout
        When: A credit is attempted
        Then: STORE_ERROR and the unit of work is rolled back
        """
        # Arrange
        async def slow_post(**kwargs):
            await asyncio.sleep(1)

        mock_ledger.post = AsyncMock(side_effect=slow_post)
        use_case = CreditWallet(mock_uow, mock_ledger, timeout_seconds=0.01)

        # Act
        result = await use_case.execute(CreditCommandDTO(account_id="acc_123", amount=10))

        # Assert
        assert result.is_err()
        assert result.error.code == ErrorCode.STORE_ERROR
        assert result.error.message == "Store operation timed out"
        mock_uow.rollback.assert_called()
        mock_uow.commit.assert_not_called()

    async def test_slow_notifier_outside_timeout(self, mock_uow, mock_ledger):
        """
        Given: The store commits promptly but the notifier takes longer than the timeout
        When: A credit is executed
        Then: The committed credit is reported as a success and nothing is rolled back
        """
        # Arrange
        async def slow_publish(event):
            await asyncio.sleep(0.3)
            return True

        notifier = MagicMock()
        notifier.publish = AsyncMock(side_effect=slow_publish)
        mock_ledger.post = AsyncMock(return_value=make_posting(20, 70))
        use_case = CreditWallet(mock_uow, mock_ledger, notifier=notifier, timeout_seconds=0.2)

        # Act
        result = await use_case.execute(CreditCommandDTO(account_id="acc_123", amount=20))

        # Assert
        assert result.is_ok()
        assert result.value.balance_after == 70
        assert notifier.publish.call_count == 2
        mock_uow.commit.assert_called_once()
        mock_uow.rollback.assert_not_called()


@pytest.mark.asyncio
class TestDebitWallet:

    async def test_debit_posts_usage(self, mock_uow, mock_ledger):
        # Arrange
        mock_ledger.post = AsyncMock(return_value=make_posting(-45, 5, TransactionType.USAGE))
        use_case = DebitWallet(mock_uow, mock_ledger)

        # Act
        result = await use_case.execute(DebitCommandDTO(account_id="acc_123", amount=45))

        # Assert
        assert result.is_ok()
        assert result.value.amount == -45
        assert result.value.transaction_type == "usage"
        kwargs = mock_ledger.post.call_args.kwargs
        assert kwargs["amount"] == -45
        assert kwargs["transaction_type"] == TransactionType.USAGE
        mock_uow.commit.assert_called_once()

    async def test_insufficient_balance(self, mock_uow, mock_ledger, mock_notifier):
        """
        Given: Balance 30
        When: 45 ALC are debited
        Then: INSUFFICIENT_BALANCE, nothing committed or published
        """
        # Arrange
        mock_ledger.post = AsyncMock(
            side_effect=InsufficientBalanceError("Insufficient balance. Required: 45, Available: 30")
        )
        use_case = DebitWallet(mock_uow, mock_ledger, notifier=mock_notifier)

        # Act
        result = await use_case.execute(DebitCommandDTO(account_id="acc_123", amount=45))

        # Assert
        assert result.is_err()
        assert result.error.code == ErrorCode.INSUFFICIENT_BALANCE
        assert "Available: 30" in result.error.message
        mock_uow.commit.assert_not_called()
        mock_uow.rollback.assert_called_once()
        mock_notifier.publish.assert_not_called()


@pytest.mark.asyncio
class TestAdjustBalance:

    async def test_negative_adjustment_is_admin_debit(self, mock_uow, mock_ledger):
        # Arrange
        mock_ledger.post = AsyncMock(return_value=make_posting(
            -20, 30, TransactionType.ADMIN_DEBIT, status=TransactionStatus.APPROVED, admin_id="admin_1",
        ))
        use_case = AdjustBalance(mock_uow, mock_ledger)

        # Act
        result = await use_case.execute(
            AdjustBalanceCommandDTO(account_id="acc_123", amount=-20, admin_id="admin_1", reason="Chargeback")
        )

        # Assert
        assert result.is_ok()
        assert result.value.admin_id == "admin_1"
        kwargs = mock_ledger.post.call_args.kwargs
        assert kwargs["transaction_type"] == TransactionType.ADMIN_DEBIT
        assert kwargs["status"] == TransactionStatus.APPROVED
        assert kwargs["description"] == "Chargeback"

    async def test_positive_adjustment_is_admin_credit(self, mock_uow, mock_ledger):
        # Arrange
        mock_ledger.post = AsyncMock(return_value=make_posting(20, 70, TransactionType.ADMIN_CREDIT))
        use_case = AdjustBalance(mock_uow, mock_ledger)

        # Act
        await use_case.execute(AdjustBalanceCommandDTO(account_id="acc_123", amount=20, admin_id="admin_1"))

        # Assert
        assert mock_ledger.post.call_args.kwargs["transaction_type"] == TransactionType.ADMIN_CREDIT

    async def test_zero_adjustment_rejected(self, mock_uow, mock_ledger):
        # Arrange
        mock_ledger.post = AsyncMock()
        use_case = AdjustBalance(mock_uow, mock_ledger)

        # Act
        result = await use_case.execute(AdjustBalanceCommandDTO(account_id="acc_123", amount=0, admin_id="admin_1"))

        # Assert
        assert result.error.code == ErrorCode.INVALID_AMOUNT
        mock_ledger.post.assert_not_called()

    async def test_adjustment_records_admin_log_before_commit(self, mock_uow, mock_ledger):
        """
        Given: An admin log repository is wired
        When: admin_1 credits 20 ALC
        Then: One adjust_balance entry with the posting details is written, then committed
        """
        # Arrange
        calls = []
        mock_ledger.post = AsyncMock(return_value=make_posting(20, 70, TransactionType.ADMIN_CREDIT, transaction_id=5))
        admin_log_repo = MagicMock()
        admin_log_repo.create = AsyncMock(side_effect=lambda log: calls.append("log") or log)
        mock_uow.commit = AsyncMock(side_effect=lambda: calls.append("commit"))
        use_case = AdjustBalance(mock_uow, mock_ledger, admin_log_repo=admin_log_repo)

        # Act
        result = await use_case.execute(
            AdjustBalanceCommandDTO(account_id="acc_123", amount=20, admin_id="admin_1", reason="Goodwill")
        )

        # Assert
        assert result.is_ok()
        assert calls == ["log", "commit"]
        log = admin_log_repo.create.call_args.args[0]
        assert log.admin_id == "admin_1"
        assert log.action == AdminAction.ADJUST_BALANCE
        assert log.target_account_id == "acc_123"
        assert log.details == {"amount": 20, "reason": "Goodwill", "transaction_id": 5, "balance_after": 70}

    async def test_rejected_adjustment_writes_no_admin_log(self, mock_uow, mock_ledger):
        # Arrange
        mock_ledger.post = AsyncMock(side_effect=InsufficientBalanceError("Insufficient balance"))
        admin_log_repo = MagicMock()
        admin_log_repo.create = AsyncMock()
        use_case = AdjustBalance(mock_uow, mock_ledger, admin_log_repo=admin_log_repo)

        # Act
        result = await use_case.execute(AdjustBalanceCommandDTO(account_id="acc_123", amount=-80, admin_id="admin_1"))

        # Assert
        assert result.error.code == ErrorCode.INSUFFICIENT_BALANCE
        admin_log_repo.create.assert_not_called()
        mock_uow.rollback.assert_called_once()


@pytest.mark.asyncio
class TestReadUseCases:

    async def test_get_wallet_commits_lazy_creation(self, mock_uow, mock_ledger):
        # Arrange
        mock_ledger.get_wallet = AsyncMock(return_value=make_wallet(50))
        use_case = GetWallet(mock_uow, mock_ledger)

        # Act
        result = await use_case.execute("acc_123")

        # Assert
        assert result.is_ok()
        assert result.value.balance == 50
        assert result.value.total_spent == 0
        mock_uow.commit.assert_called_once()

    async def test_list_transactions(self):
        # Arrange
        repo = MagicMock()
        repo.list_by_account = AsyncMock(return_value=[
            make_transaction(-5, 45, TransactionType.USAGE, transaction_id=2),
            make_transaction(10, 50, TransactionType.REWARD, transaction_id=1),
        ])
        repo.count_by_account = AsyncMock(return_value=12)
        use_case = ListTransactions(repo)

        # Act
        result = await use_case.execute(ListTransactionsQueryDTO(account_id="acc_123", limit=2, offset=0))

        # Assert
        assert result.is_ok()
        assert [t.transaction_id for t in result.value.transactions] == [2, 1]
        assert result.value.total == 12
        repo.list_by_account.assert_called_once_with("acc_123", limit=2, offset=0)

    async def test_list_transactions_store_error(self):
        # Arrange
        repo = MagicMock()
        repo.list_by_account = AsyncMock(side_effect=RuntimeError("disk I/O error"))

        # Act
        result = await ListTransactions(repo).execute(ListTransactionsQueryDTO(account_id="acc_123"))

        # Assert
        assert result.error.code == ErrorCode.STORE_ERROR
