"""RedeemCoupon Use Case

Validates a coupon code and credits its value to the redeeming account.
"""

import asyncio
import logging
from typing import Optional, Tuple
from libs.result import Result, Return, Error
from src.app.errors import (
    AlreadyUsedError,
    CouponExpiredError,
    ErrorCode,
    InvalidCodeError,
    LedgerError,
    UsesExhaustedError,
    store_error,
)
from src.app.repositories.coupon_repository import CouponRepository
from src.app.repositories.coupon_use_repository import CouponUseRepository
from src.app.services.change_notifier import ChangeEntity, ChangeEvent, ChangeNotifier, notify_changes
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.wallet_ledger import LedgerPosting, WalletLedger
from src.app.use_cases.store_timeout import DEFAULT_STORE_TIMEOUT_SECONDS
from src.app.use_cases.wallet.dtos import to_transaction_dto
from src.domain.coupon import Coupon, normalize_code
from src.domain.coupon_use import CouponUse
from .coupon_credit import credit_coupon_use
from .dtos import RedeemCouponCommandDTO, RedeemCouponResponseDTO

logger = logging.getLogger(__name__)


class RedeemCoupon:
    """
    Use Case: Redeem a coupon

    Validation order (first failure wins):
    1. Unknown or inactive code -> INVALID_CODE
    2. Past expires_at -> EXPIRED
    3. current_uses >= max_uses -> USES_EXHAUSTED
    4. Account already redeemed -> ALREADY_USED

    Writes happen in two commits:
    - Phase 1: redemption row (unique per coupon/account) + use counter
    - Phase 2: ALC credit, redemption stamped with the transaction

    A phase 2 failure leaves a recorded but uncredited redemption and is
    reported as PARTIAL_FAILURE; the repair job finishes it later.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger: WalletLedger,
        coupon_repo: CouponRepository,
        coupon_use_repo: CouponUseRepository,
        notifier: Optional[ChangeNotifier] = None,
        timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ):
        self.uow = uow
        self.ledger = ledger
        self.coupon_repo = coupon_repo
        self.coupon_use_repo = coupon_use_repo
        self.notifier = notifier
        self.timeout_seconds = timeout_seconds

    async def execute(self, command: RedeemCouponCommandDTO) -> Result[RedeemCouponResponseDTO]:
        account_id = command.account_id
        code = normalize_code(command.code)

        # Phase 1: record the redemption
        try:
            coupon, coupon_use = await asyncio.wait_for(
                self._record_redemption(account_id, code), timeout=self.timeout_seconds
            )
            await self.uow.commit()
        except LedgerError as e:
            await self.uow.rollback()
            logger.warning(f"Coupon {code} rejected for account {account_id}: {e.code}")
            return Return.err(e.to_error())
        except asyncio.TimeoutError:
            await self.uow.rollback()
            logger.error(f"Coupon {code} redemption timed out for account {account_id}")
            return Return.err(
                Error(
                    code=ErrorCode.STORE_ERROR,
                    message="Store operation timed out",
                    reason=f"timeout={self.timeout_seconds}s",
                )
            )
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Coupon {code} redemption failed for account {account_id}: {e}")
            return Return.err(store_error(e, "Failed to redeem coupon"))

        # Phase 2: credit the wallet
        try:
            posting = await asyncio.wait_for(
                self._credit(coupon, coupon_use), timeout=self.timeout_seconds
            )
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            reason = str(e) or type(e).__name__
            logger.error(
                f"PARTIAL FAILURE: coupon {code} (coupon_use_id={coupon_use.id}) recorded "
                f"for account {account_id} but not credited: {reason}"
            )
            return Return.err(
                Error(
                    code=ErrorCode.PARTIAL_FAILURE,
                    message="Coupon redemption recorded but the credit was not applied",
                    reason=f"coupon_use_id={coupon_use.id}: {reason}",
                )
            )

        logger.info(f"Coupon {code} redeemed by account {account_id} (+{coupon.alc_value} ALC)")

        events = posting.change_events()
        events.append(ChangeEvent(
            account_id=account_id,
            entity=ChangeEntity.COUPON_USE,
            action="insert",
            payload=coupon_use.model_dump(mode="json"),
        ))
        await notify_changes(self.notifier, events)

        return Return.ok(
            RedeemCouponResponseDTO(
                account_id=account_id,
                code=coupon.code,
                credited=coupon.alc_value,
                balance=posting.wallet.balance,
                transaction=to_transaction_dto(posting.transaction),
            )
        )

    async def _record_redemption(self, account_id: str, code: str) -> Tuple[Coupon, CouponUse]:
        now = self.ledger.clock.now()

        coupon = await self.coupon_repo.get_by_code(code)
        if coupon is None or not coupon.is_active:
            raise InvalidCodeError(f"Coupon code {code} is not valid")

        if coupon.is_expired(now):
            raise CouponExpiredError(
                f"Coupon {code} expired",
                reason=f"expires_at={coupon.expires_at.isoformat()}",
            )

        if coupon.is_exhausted():
            raise UsesExhaustedError(
                f"Coupon {code} has reached its usage limit",
                reason=f"current_uses={coupon.current_uses}, max_uses={coupon.max_uses}",
            )

        if await self.coupon_use_repo.get(coupon.id, account_id):
            raise AlreadyUsedError(f"Coupon {code} was already used by this account")

        # The unique constraint decides concurrent redemptions, not the read above
        coupon_use = await self.coupon_use_repo.create(
            CouponUse(coupon_id=coupon.id, account_id=account_id, created_at=now)
        )
        if coupon_use is None:
            raise AlreadyUsedError(f"Coupon {code} was already used by this account")

        if not await self.coupon_repo.increment_uses(coupon.id, now):
            raise UsesExhaustedError(
                f"Coupon {code} has reached its usage limit",
                reason=f"max_uses={coupon.max_uses}",
            )

        return coupon, coupon_use

    async def _credit(self, coupon: Coupon, coupon_use: CouponUse) -> LedgerPosting:
        return await credit_coupon_use(
            self.ledger, self.coupon_use_repo, coupon, coupon_use, self.ledger.clock.now()
        )
