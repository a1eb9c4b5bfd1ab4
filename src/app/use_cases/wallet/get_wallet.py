"""GetWallet Use Case

Returns the account's wallet, creating it with the welcome balance on first access.
"""

import logging
from libs.result import Result, Return
from src.app.errors import LedgerError, store_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.wallet_ledger import WalletLedger
from src.app.use_cases.store_timeout import DEFAULT_STORE_TIMEOUT_SECONDS, with_store_timeout
from src.domain.wallet import Wallet
from .dtos import WalletResponseDTO, to_wallet_dto

logger = logging.getLogger(__name__)


class GetWallet:

    def __init__(
        self,
        uow: UnitOfWork,
        ledger: WalletLedger,
        timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ):
        self.uow = uow
        self.ledger = ledger
        self.timeout_seconds = timeout_seconds

    async def execute(self, account_id: str) -> Result[WalletResponseDTO]:
        try:
            wallet = await self._load(account_id)
            return Return.ok(to_wallet_dto(wallet))
        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to load wallet for account {account_id}: {e}")
            return Return.err(store_error(e, "Failed to retrieve wallet"))

    @with_store_timeout
    async def _load(self, account_id: str) -> Wallet:
        wallet = await self.ledger.get_wallet(account_id)
        await self.uow.commit()
        return wallet
