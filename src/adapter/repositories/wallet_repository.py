"""SQLAlchemy implementation of WalletRepository

Balance mutations are single conditional UPDATE statements evaluated by the
database, so concurrent debits and credits on one wallet serialise on the row
and the non-negative balance rule is enforced store-side.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.wallet_repository import WalletRepository
from src.domain.wallet import Wallet


class SqlAlchemyWalletRepository(WalletRepository):
    """
    SQLAlchemy implementation of WalletRepository

    Features:
    - Lazy creation guarded by the unique account_id constraint
    - Atomic conditional balance updates (balance + delta >= 0)
    - Optional SELECT FOR UPDATE on reads
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_account_id(self, account_id: str, for_update: bool = False) -> Optional[Wallet]:
        """
        Retrieve wallet by account ID with optional row-level locking

        Args:
            account_id: Account identifier
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Wallet if found, None otherwise
        """
        stmt = (
            select(Wallet)
            .where(Wallet.account_id == account_id)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create(self, account_id: str, initial_balance: int) -> Wallet:
        wallet = await self.get_by_account_id(account_id)
        if wallet:
            return wallet

        wallet = Wallet(
            account_id=account_id,
            balance=initial_balance,
            initial_balance=initial_balance,
        )
        try:
            async with self.session.begin_nested():
                self.session.add(wallet)
                await self.session.flush()
        except IntegrityError:
            # Another request created the wallet first
            return await self.get_by_account_id(account_id)

        await self.session.refresh(wallet)
        return wallet

    async def apply_delta(self, account_id: str, delta: int, now: datetime) -> Optional[Wallet]:
        """
        Apply a signed balance change in one conditional UPDATE

        Args:
            account_id: Account identifier
            delta: Signed ALC amount
            now: Update timestamp

        Returns:
            Updated Wallet, or None if no row matched (balance would go negative)
        """
        stmt = (
            update(Wallet)
            .where(Wallet.account_id == account_id)
            .where(Wallet.balance + delta >= 0)
            .values(
                balance=Wallet.balance + delta,
                total_earned=Wallet.total_earned + max(delta, 0),
                total_spent=Wallet.total_spent + max(-delta, 0),
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self.get_by_account_id(account_id)

    async def list_all(self, limit: int = 1000, offset: int = 0) -> List[Wallet]:
        stmt = select(Wallet).order_by(Wallet.id).limit(limit).offset(offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
