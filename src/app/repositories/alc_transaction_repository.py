"""ALC Transaction Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.alc_transaction import AlcTransaction


class AlcTransactionRepository(ABC):
    """
    Repository interface for AlcTransaction persistence

    Transactions are append-only: there is no update or delete.
    """

    @abstractmethod
    async def create(self, transaction: AlcTransaction) -> AlcTransaction:
        """
        Create a new transaction

        Args:
            transaction: AlcTransaction entity to persist

        Returns:
            Created AlcTransaction with generated ID

        Raises:
            DuplicateIdempotencyKeyError: idempotency_key is already recorded
        """
        pass

    @abstractmethod
    async def get_by_id(self, transaction_id: int) -> Optional[AlcTransaction]:
        pass

    @abstractmethod
    async def get_by_idempotency_key(self, idempotency_key: str) -> Optional[AlcTransaction]:
        """
        Retrieve transaction by idempotency key

        Returns:
            AlcTransaction if a mutation with this key was already applied
        """
        pass

    @abstractmethod
    async def list_by_account(self, account_id: str, limit: int = 50, offset: int = 0) -> List[AlcTransaction]:
        """
        List an account's transactions, newest first

        Args:
            account_id: Account identifier
            limit: Maximum number of transactions to return
            offset: Number of transactions to skip

        Returns:
            List of AlcTransaction ordered by created_at DESC
        """
        pass

    @abstractmethod
    async def count_by_account(self, account_id: str) -> int:
        pass

    @abstractmethod
    async def sum_amounts_by_account(self, account_id: str) -> int:
        """Sum of signed amounts of every transaction of the account"""
        pass
