"""Wallet Repository Interface

Defines the contract for wallet persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from src.domain.wallet import Wallet


class WalletRepository(ABC):
    """
    Repository interface for Wallet persistence

    Balance changes go through apply_delta, a single conditional update,
    so concurrent mutations on one account cannot lose updates or go
    negative.
    """

    @abstractmethod
    async def get_by_account_id(self, account_id: str, for_update: bool = False) -> Optional[Wallet]:
        """
        Retrieve wallet by account ID

        Args:
            account_id: Account identifier
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Wallet if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_or_create(self, account_id: str, initial_balance: int) -> Wallet:
        """
        Return the account's wallet, creating it with initial_balance if missing

        Safe against two requests creating the same wallet concurrently.
        """
        pass

    @abstractmethod
    async def apply_delta(self, account_id: str, delta: int, now: datetime) -> Optional[Wallet]:
        """
        Atomically add delta to the balance if the result stays >= 0

        Also bumps total_earned (delta > 0) or total_spent (delta < 0).

        Returns:
            Updated Wallet, or None when the balance would go negative
        """
        pass

    @abstractmethod
    async def list_all(self, limit: int = 1000, offset: int = 0) -> List[Wallet]:
        """List wallets ordered by id (used by reconciliation)"""
        pass
