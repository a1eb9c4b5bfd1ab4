"""AdjustBalance Use Case

Manual balance correction by an administrator.
"""

import logging
from typing import Optional
from libs.result import Result, Return
from src.app.errors import InvalidAmountError, LedgerError, store_error
from src.app.repositories.admin_log_repository import AdminLogRepository
from src.app.services.change_notifier import ChangeNotifier, notify_changes
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.wallet_ledger import LedgerPosting, WalletLedger
from src.app.use_cases.admin.audit import record_admin_action
from src.app.use_cases.store_timeout import DEFAULT_STORE_TIMEOUT_SECONDS, with_store_timeout
from src.domain.admin_log import AdminAction
from src.domain.alc_transaction import TransactionStatus, TransactionType
from .dtos import AdjustBalanceCommandDTO, TransactionResponseDTO, to_transaction_dto

logger = logging.getLogger(__name__)


class AdjustBalance:
    """
    Use Case: Administrator balance adjustment

    Business Rules:
    1. amount != 0; its sign picks admin_credit or admin_debit
    2. An admin debit cannot take the balance below zero
    3. The administrator id is recorded on the transaction
    4. An admin log entry commits with the adjustment
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger: WalletLedger,
        notifier: Optional[ChangeNotifier] = None,
        admin_log_repo: Optional[AdminLogRepository] = None,
        timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ):
        self.uow = uow
        self.ledger = ledger
        self.notifier = notifier
        self.admin_log_repo = admin_log_repo
        self.timeout_seconds = timeout_seconds

    async def execute(self, command: AdjustBalanceCommandDTO) -> Result[TransactionResponseDTO]:
        try:
            posting = await self._adjust(command)

        except LedgerError as e:
            await self.uow.rollback()
            logger.warning(
                f"Adjustment by {command.admin_id} rejected for account {command.account_id}: {e.message}"
            )
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Adjustment failed for account {command.account_id}: {e}")
            return Return.err(store_error(e, "Failed to adjust balance"))

        logger.info(
            f"Admin {command.admin_id} adjusted account {command.account_id} by {command.amount} ALC"
        )
        await notify_changes(self.notifier, posting.change_events())
        return Return.ok(to_transaction_dto(posting.transaction))

    @with_store_timeout
    async def _adjust(self, command: AdjustBalanceCommandDTO) -> LedgerPosting:
        if command.amount == 0:
            raise InvalidAmountError("Adjustment amount must not be zero")

        transaction_type = (
            TransactionType.ADMIN_CREDIT if command.amount > 0 else TransactionType.ADMIN_DEBIT
        )
        posting = await self.ledger.post(
            account_id=command.account_id,
            amount=command.amount,
            transaction_type=transaction_type,
            description=command.reason,
            status=TransactionStatus.APPROVED,
            admin_id=command.admin_id,
        )
        await record_admin_action(
            self.admin_log_repo,
            command.admin_id,
            AdminAction.ADJUST_BALANCE,
            now=self.ledger.clock.now(),
            target_account_id=command.account_id,
            details={
                "amount": command.amount,
                "reason": command.reason,
                "transaction_id": posting.transaction.id,
                "balance_after": posting.transaction.balance_after,
            },
        )
        await self.uow.commit()
        return posting
