"""Coupon credit step, shared by redemption and repair"""

from datetime import datetime
from src.app.repositories.coupon_use_repository import CouponUseRepository
from src.app.services.wallet_ledger import LedgerPosting, WalletLedger
from src.domain.alc_transaction import TransactionType
from src.domain.coupon import Coupon
from src.domain.coupon_use import CouponUse


def coupon_idempotency_key(coupon_id: int, account_id: str) -> str:
    return f"coupon:{coupon_id}:{account_id}"


async def credit_coupon_use(
    ledger: WalletLedger,
    coupon_use_repo: CouponUseRepository,
    coupon: Coupon,
    coupon_use: CouponUse,
    now: datetime,
) -> LedgerPosting:
    """
    Credit the coupon value and stamp the redemption with the transaction

    The idempotency key makes a second call for the same redemption return
    the original transaction instead of crediting again.
    """
    posting = await ledger.post(
        account_id=coupon_use.account_id,
        amount=coupon.alc_value,
        transaction_type=TransactionType.COUPON,
        description=f"Coupon {coupon.code}",
        idempotency_key=coupon_idempotency_key(coupon.id, coupon_use.account_id),
    )
    await coupon_use_repo.mark_credited(coupon_use.id, posting.transaction.id, now)
    coupon_use.transaction_id = posting.transaction.id
    coupon_use.credited_at = now
    return posting
