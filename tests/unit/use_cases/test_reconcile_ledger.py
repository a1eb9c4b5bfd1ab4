"""Unit tests for ReconcileLedger use case

Tests cover:
- Balanced wallets
- Discrepancy detection (balance vs initial_balance + transaction sum)
- Paging through wallets
- Error handling
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.errors import ErrorCode
from src.app.use_cases.wallet import ReconcileLedger
from tests.fixtures.factories import make_wallet


@pytest.fixture
def mock_wallet_repo():
    return MagicMock()


@pytest.fixture
def mock_transaction_repo():
    return MagicMock()


@pytest.mark.asyncio
class TestReconcileLedger:

    async def test_no_discrepancies(self, mock_wallet_repo, mock_transaction_repo, frozen_clock):
        """
        Given: Two wallets whose balances match their history
        When: Reconciliation runs
        Then: Both checked, no discrepancies
        """
        # Arrange
        mock_wallet_repo.list_all = AsyncMock(side_effect=[
            [make_wallet(60, account_id="a", wallet_id=1), make_wallet(50, account_id="b", wallet_id=2)],
            [],
        ])
        mock_transaction_repo.sum_amounts_by_account = AsyncMock(side_effect=[10, 0])
        use_case = ReconcileLedger(mock_wallet_repo, mock_transaction_repo, frozen_clock)

        # Act
        result = await use_case.execute()

        # Assert
        assert result.is_ok()
        assert result.value.total_wallets_checked == 2
        assert result.value.discrepancies_found == 0
        assert result.value.reconciliation_time == frozen_clock.now()

    async def test_detects_discrepancy(self, mock_wallet_repo, mock_transaction_repo, frozen_clock):
        """
        Given: Wallet balance 100 but history says 50 + 30
        When: Reconciliation runs
        Then: One discrepancy with difference 20
        """
        # Arrange
        mock_wallet_repo.list_all = AsyncMock(side_effect=[[make_wallet(100, wallet_id=7)], []])
        mock_transaction_repo.sum_amounts_by_account = AsyncMock(return_value=30)
        use_case = ReconcileLedger(mock_wallet_repo, mock_transaction_repo, frozen_clock)

        # Act
        result = await use_case.execute()

        # Assert
        discrepancy = result.value.discrepancies[0]
        assert result.value.discrepancies_found == 1
        assert discrepancy.wallet_id == 7
        assert discrepancy.expected_balance == 80
        assert discrepancy.difference == 20

    async def test_pages_through_wallets(self, mock_wallet_repo, mock_transaction_repo, frozen_clock):
        # Arrange
        mock_wallet_repo.list_all = AsyncMock(side_effect=[
            [make_wallet(50, account_id="a", wallet_id=1)],
            [make_wallet(50, account_id="b", wallet_id=2)],
            [],
        ])
        mock_transaction_repo.sum_amounts_by_account = AsyncMock(return_value=0)
        use_case = ReconcileLedger(mock_wallet_repo, mock_transaction_repo, frozen_clock, page_size=1)

        # Act
        result = await use_case.execute()

        # Assert
        assert result.value.total_wallets_checked == 2
        offsets = [c.kwargs["offset"] for c in mock_wallet_repo.list_all.call_args_list]
        assert offsets == [0, 1, 2]

    async def test_store_error(self, mock_wallet_repo, mock_transaction_repo, frozen_clock):
        # Arrange
        mock_wallet_repo.list_all = AsyncMock(side_effect=RuntimeError("connection lost"))
        use_case = ReconcileLedger(mock_wallet_repo, mock_transaction_repo, frozen_clock)

        # Act
        result = await use_case.execute()

        # Assert
        assert result.is_err()
        assert result.error.code == ErrorCode.STORE_ERROR
