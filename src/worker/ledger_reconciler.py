"""Ledger Reconciliation Background Worker

Periodically checks wallet balances against transaction history and
finishes coupon redemptions that were recorded without a credit.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from typing import Optional
from pydantic import BaseModel

from config import ApplicationConfig
from src.adapter.database import create_store_engine, create_session_factory
from src.adapter.repositories.alc_transaction_repository import SqlAlchemyAlcTransactionRepository
from src.adapter.repositories.coupon_repository import SqlAlchemyCouponRepository
from src.adapter.repositories.coupon_use_repository import SqlAlchemyCouponUseRepository
from src.adapter.repositories.wallet_repository import SqlAlchemyWalletRepository
from src.adapter.services.clock import SystemClock
from src.adapter.services.change_notifier import create_change_notifier
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.clock import Clock
from src.app.services.wallet_ledger import WalletLedger
from src.app.use_cases.coupons import RepairCouponRedemptions, RepairResultDTO
from src.app.use_cases.wallet import ReconcileLedger, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconciliationRunDTO(BaseModel):
    reconciliation: Optional[ReconciliationResultDTO] = None
    repair: Optional[RepairResultDTO] = None


class LedgerReconcilerWorker:
    """
    Background worker for wallet reconciliation

    Features:
    - Compares balances against initial_balance + transaction sums
    - Repairs uncredited coupon redemptions (idempotent, never double credits)
    - Can run once or continuously

    Usage:
        worker = LedgerReconcilerWorker()
        result = await worker.run_once()

        await worker.run_forever(interval_seconds=86400)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        repair_coupons: Optional[bool] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            repair_coupons: Repair partial coupon redemptions before reconciling
                            (defaults to ApplicationConfig.RECONCILIATION_REPAIR_COUPONS)
            clock: Time source (defaults to SystemClock)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.repair_coupons = (
            ApplicationConfig.RECONCILIATION_REPAIR_COUPONS if repair_coupons is None else repair_coupons
        )
        self.clock = clock or SystemClock()
        self.notifier = create_change_notifier(webhook_url=ApplicationConfig.CHANGE_WEBHOOK_URL)

        self.engine = create_store_engine(
            self.db_uri,
            busy_timeout_seconds=ApplicationConfig.SQLITE_BUSY_TIMEOUT_SECONDS,
        )
        self.async_session_factory = create_session_factory(self.engine)

        logger.info("LedgerReconcilerWorker initialized")

    async def repair(self) -> RepairResultDTO:
        async with self.async_session_factory() as session:
            ledger = WalletLedger(
                SqlAlchemyWalletRepository(session),
                SqlAlchemyAlcTransactionRepository(session),
                self.clock,
                welcome_balance=ApplicationConfig.WELCOME_BALANCE,
                uow=SqlAlchemyUnitOfWork(session),
            )
            use_case = RepairCouponRedemptions(
                uow=SqlAlchemyUnitOfWork(session),
                ledger=ledger,
                coupon_repo=SqlAlchemyCouponRepository(session),
                coupon_use_repo=SqlAlchemyCouponUseRepository(session),
                notifier=self.notifier,
            )
            result = await use_case.execute()

            if result.is_err():
                raise RuntimeError(f"Coupon repair failed: {result.error.message}")

            response = result.value
            if response.redemptions_failed:
                logger.error(
                    f"ALERT: {response.redemptions_failed} coupon redemptions could not be repaired"
                )
            return response

    async def reconcile(self) -> ReconciliationResultDTO:
        async with self.async_session_factory() as session:
            use_case = ReconcileLedger(
                wallet_repo=SqlAlchemyWalletRepository(session),
                transaction_repo=SqlAlchemyAlcTransactionRepository(session),
                clock=self.clock,
            )
            result = await use_case.execute()
            await session.rollback()

            if result.is_err():
                raise RuntimeError(f"Reconciliation failed: {result.error.message}")

            response = result.value

            if response.discrepancies_found > 0:
                logger.error(
                    f"ALERT: {response.discrepancies_found} wallet discrepancies found!"
                )
                for d in response.discrepancies:
                    logger.error(
                        f"  - Account {d.account_id} (wallet_id={d.wallet_id}): "
                        f"expected={d.expected_balance}, actual={d.balance}, "
                        f"diff={d.difference}"
                    )

            return response

    async def run_once(self) -> ReconciliationRunDTO:
        """
        Run repair (if enabled) and reconciliation once

        Returns:
            ReconciliationRunDTO with both results
        """
        if not ApplicationConfig.RECONCILIATION_ENABLED:
            logger.info("Ledger reconciliation is disabled, skipping")
            return ReconciliationRunDTO()

        repair = await self.repair() if self.repair_coupons else None
        reconciliation = await self.reconcile()
        return ReconciliationRunDTO(reconciliation=reconciliation, repair=repair)

    async def run_forever(self, interval_seconds: int = 86400):
        """
        Run reconciliation continuously at specified interval

        Args:
            interval_seconds: Seconds between runs (default: 24 hours)
        """
        logger.info(
            f"Starting continuous ledger reconciliation with {interval_seconds}s interval"
        )

        while True:
            try:
                result = await self.run_once()
                if result.reconciliation:
                    logger.info(
                        f"Reconciliation cycle complete. "
                        f"Checked {result.reconciliation.total_wallets_checked} wallets, "
                        f"found {result.reconciliation.discrepancies_found} discrepancies"
                    )
            except Exception as e:
                logger.error(f"Reconciliation cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("LedgerReconcilerWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m src.worker.ledger_reconciler --once

        # Run continuously (default: daily)
        python -m src.worker.ledger_reconciler

        # Skip coupon repair
        python -m src.worker.ledger_reconciler --once --no-repair
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Ledger Reconciliation Worker")
    parser.add_argument(
        "--once", action="store_true", help="Run once and exit"
    )
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS,
        help="Interval between runs in seconds (default: 86400 = 24 hours)"
    )
    parser.add_argument(
        "--no-repair", action="store_true",
        help="Do not repair uncredited coupon redemptions"
    )
    args = parser.parse_args()

    worker = LedgerReconcilerWorker(repair_coupons=False if args.no_repair else None)

    try:
        if args.once:
            result = await worker.run_once()
            if result.repair:
                print("Coupon repair:")
                print(f"  Redemptions checked: {result.repair.redemptions_checked}")
                print(f"  Repaired: {result.repair.redemptions_repaired}")
                print(f"  Failed: {result.repair.redemptions_failed}")
            if result.reconciliation:
                r = result.reconciliation
                print("Reconciliation complete:")
                print(f"  Total wallets checked: {r.total_wallets_checked}")
                print(f"  Discrepancies found: {r.discrepancies_found}")
                print(f"  Execution time: {r.execution_time_ms}ms")
                for d in r.discrepancies:
                    print(
                        f"  - Account {d.account_id}: "
                        f"expected={d.expected_balance}, actual={d.balance}, diff={d.difference}"
                    )
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
