"""RepairCouponRedemptions Use Case

Finishes redemptions that were recorded but never credited.
"""

import logging
from typing import Optional
from libs.result import Result, Return
from src.app.errors import store_error
from src.app.repositories.coupon_repository import CouponRepository
from src.app.repositories.coupon_use_repository import CouponUseRepository
from src.app.services.change_notifier import ChangeNotifier, notify_changes
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.wallet_ledger import WalletLedger
from .coupon_credit import credit_coupon_use
from .dtos import RepairResultDTO

logger = logging.getLogger(__name__)


class RepairCouponRedemptions:
    """
    Use Case: Repair partial coupon redemptions

    Business Rules:
    1. Only redemptions without a transaction are considered
    2. The credit reuses the redemption's idempotency key, so a repair
       can never credit twice
    3. Each redemption commits on its own; one failure does not stop the batch
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger: WalletLedger,
        coupon_repo: CouponRepository,
        coupon_use_repo: CouponUseRepository,
        notifier: Optional[ChangeNotifier] = None,
        batch_size: int = 100,
    ):
        self.uow = uow
        self.ledger = ledger
        self.coupon_repo = coupon_repo
        self.coupon_use_repo = coupon_use_repo
        self.notifier = notifier
        self.batch_size = batch_size

    async def execute(self) -> Result[RepairResultDTO]:
        try:
            pending = await self.coupon_use_repo.list_uncredited(limit=self.batch_size)
        except Exception as e:
            await self.uow.rollback()
            return Return.err(store_error(e, "Failed to list uncredited redemptions"))

        repaired_ids: list[int] = []
        failed = 0

        for coupon_use in pending:
            try:
                coupon = await self.coupon_repo.get_by_id(coupon_use.coupon_id)
                if coupon is None:
                    logger.error(
                        f"Coupon {coupon_use.coupon_id} missing for redemption {coupon_use.id}"
                    )
                    failed += 1
                    continue

                posting = await credit_coupon_use(
                    self.ledger, self.coupon_use_repo, coupon, coupon_use, self.ledger.clock.now()
                )
                await self.uow.commit()
            except Exception as e:
                await self.uow.rollback()
                failed += 1
                logger.error(f"Repair of coupon redemption {coupon_use.id} failed: {e}")
                continue

            repaired_ids.append(coupon_use.id)
            logger.warning(
                f"Repaired coupon redemption {coupon_use.id}: account {coupon_use.account_id} "
                f"credited {coupon.alc_value} ALC for {coupon.code}"
            )
            await notify_changes(self.notifier, posting.change_events())

        return Return.ok(
            RepairResultDTO(
                redemptions_checked=len(pending),
                redemptions_repaired=len(repaired_ids),
                redemptions_failed=failed,
                repaired_coupon_use_ids=repaired_ids,
            )
        )
