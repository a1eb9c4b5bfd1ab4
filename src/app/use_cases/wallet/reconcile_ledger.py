"""ReconcileLedger Use Case

Checks every wallet balance against its transaction history.
"""

import logging
import time
from libs.result import Result, Return
from src.app.errors import store_error
from src.app.repositories.alc_transaction_repository import AlcTransactionRepository
from src.app.repositories.wallet_repository import WalletRepository
from src.app.services.clock import Clock
from .dtos import ReconciliationResultDTO, WalletDiscrepancyDTO

logger = logging.getLogger(__name__)


class ReconcileLedger:
    """
    Use Case: Reconcile wallets against transactions

    Business Rules:
    1. expected balance = initial_balance + sum(transaction amounts)
    2. Any mismatch is reported and logged
    3. Does NOT modify any data (read-only reconciliation)
    """

    def __init__(
        self,
        wallet_repo: WalletRepository,
        transaction_repo: AlcTransactionRepository,
        clock: Clock,
        page_size: int = 500,
    ):
        self.wallet_repo = wallet_repo
        self.transaction_repo = transaction_repo
        self.clock = clock
        self.page_size = page_size

    async def execute(self) -> Result[ReconciliationResultDTO]:
        start_time = time.time()
        reconciliation_time = self.clock.now()

        try:
            logger.info("Starting wallet reconciliation")

            discrepancies: list[WalletDiscrepancyDTO] = []
            total_wallets = 0
            offset = 0

            while True:
                wallets = await self.wallet_repo.list_all(limit=self.page_size, offset=offset)
                if not wallets:
                    break

                for wallet in wallets:
                    total_wallets += 1
                    transaction_sum = await self.transaction_repo.sum_amounts_by_account(wallet.account_id)
                    expected = wallet.initial_balance + transaction_sum

                    if wallet.balance != expected:
                        discrepancy = WalletDiscrepancyDTO(
                            account_id=wallet.account_id,
                            wallet_id=wallet.id,
                            balance=wallet.balance,
                            expected_balance=expected,
                            difference=wallet.balance - expected,
                        )
                        discrepancies.append(discrepancy)
                        logger.error(
                            f"Discrepancy found for account {wallet.account_id} "
                            f"(wallet_id={wallet.id}): balance={wallet.balance}, "
                            f"expected={expected}, difference={discrepancy.difference}"
                        )

                offset += len(wallets)

            execution_time_ms = int((time.time() - start_time) * 1000)

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"out of {total_wallets} wallets in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {total_wallets} wallets balanced "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(
                ReconciliationResultDTO(
                    total_wallets_checked=total_wallets,
                    discrepancies_found=len(discrepancies),
                    discrepancies=discrepancies,
                    reconciliation_time=reconciliation_time,
                    execution_time_ms=execution_time_ms,
                )
            )

        except Exception as e:
            logger.error(f"Wallet reconciliation failed: {e}")
            return Return.err(store_error(e, "Failed to reconcile wallets"))
