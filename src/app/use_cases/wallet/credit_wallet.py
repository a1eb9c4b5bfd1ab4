"""CreditWallet Use Case

Adds ALC to an account's wallet (purchases, rewards, coupons, transfers).
"""

import logging
from typing import Optional
from libs.result import Result, Return
from src.app.errors import InvalidAmountError, LedgerError, store_error
from src.app.services.change_notifier import ChangeNotifier, notify_changes
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.wallet_ledger import LedgerPosting, WalletLedger
from src.app.use_cases.store_timeout import DEFAULT_STORE_TIMEOUT_SECONDS, with_store_timeout
from .dtos import CreditCommandDTO, TransactionResponseDTO, to_transaction_dto

logger = logging.getLogger(__name__)


class CreditWallet:
    """
    Use Case: Credit ALC to a wallet

    Business Rules:
    1. Amount must be > 0 (INVALID_AMOUNT otherwise, nothing written)
    2. Balance, total_earned and the transaction row commit together
    3. A repeated idempotency_key returns the original transaction
    4. Committed changes are published to the change notifier
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger: WalletLedger,
        notifier: Optional[ChangeNotifier] = None,
        timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ):
        self.uow = uow
        self.ledger = ledger
        self.notifier = notifier
        self.timeout_seconds = timeout_seconds

    async def execute(self, command: CreditCommandDTO) -> Result[TransactionResponseDTO]:
        """
        Execute wallet credit

        Args:
            command: CreditCommandDTO with account_id, amount and credit kind

        Returns:
            Result[TransactionResponseDTO]: The recorded transaction or error
        """
        try:
            posting = await self._post(command)

        except LedgerError as e:
            await self.uow.rollback()
            logger.warning(f"Credit rejected for account {command.account_id}: {e.message}")
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Credit failed for account {command.account_id}: {e}")
            return Return.err(store_error(e, "Failed to credit wallet"))

        if not posting.replayed:
            logger.info(
                f"Credited {command.amount} ALC ({command.transaction_type.value}) "
                f"to account {command.account_id}, balance={posting.wallet.balance}"
            )
        await notify_changes(self.notifier, posting.change_events())
        return Return.ok(to_transaction_dto(posting.transaction))

    @with_store_timeout
    async def _post(self, command: CreditCommandDTO) -> LedgerPosting:
        if command.amount <= 0:
            raise InvalidAmountError(
                f"Credit amount must be greater than 0, got {command.amount}"
            )

        posting = await self.ledger.post(
            account_id=command.account_id,
            amount=command.amount,
            transaction_type=command.transaction_type,
            description=command.description,
            external_reference=command.external_reference,
            payment_method=command.payment_method,
            proof_url=command.proof_url,
            idempotency_key=command.idempotency_key,
        )
        await self.uow.commit()
        return posting
