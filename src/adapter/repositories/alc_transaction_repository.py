"""SQLAlchemy implementation of AlcTransactionRepository

Idempotency is enforced by the unique constraint on idempotency_key.
"""

from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.errors import DuplicateIdempotencyKeyError
from src.app.repositories.alc_transaction_repository import AlcTransactionRepository
from src.domain.alc_transaction import AlcTransaction


class SqlAlchemyAlcTransactionRepository(AlcTransactionRepository):
    """
    SQLAlchemy implementation of AlcTransactionRepository

    Features:
    - Immutable append-only transactions
    - Idempotency lookups by key
    - Paginated history, newest first
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: AlcTransaction) -> AlcTransaction:
        """
        Create a new transaction

        Raises:
            DuplicateIdempotencyKeyError: If idempotency_key already exists
        """
        self.session.add(transaction)
        try:
            await self.session.flush()
        except IntegrityError as e:
            if transaction.idempotency_key is None:
                raise
            raise DuplicateIdempotencyKeyError(
                f"Idempotency key {transaction.idempotency_key} already recorded"
            ) from e
        await self.session.refresh(transaction)
        return transaction

    async def get_by_id(self, transaction_id: int) -> Optional[AlcTransaction]:
        stmt = select(AlcTransaction).where(AlcTransaction.id == transaction_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_idempotency_key(self, idempotency_key: str) -> Optional[AlcTransaction]:
        stmt = select(AlcTransaction).where(
            AlcTransaction.idempotency_key == idempotency_key
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_account(self, account_id: str, limit: int = 50, offset: int = 0) -> List[AlcTransaction]:
        stmt = (
            select(AlcTransaction)
            .where(AlcTransaction.account_id == account_id)
            .order_by(AlcTransaction.created_at.desc(), AlcTransaction.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_account(self, account_id: str) -> int:
        stmt = select(func.count(AlcTransaction.id)).where(
            AlcTransaction.account_id == account_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def sum_amounts_by_account(self, account_id: str) -> int:
        stmt = select(func.coalesce(func.sum(AlcTransaction.amount), 0)).where(
            AlcTransaction.account_id == account_id
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
