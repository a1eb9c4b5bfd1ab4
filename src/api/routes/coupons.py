"""Coupon API Routes"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.schemas.coupon_request import RedeemRequestSchema
from src.app.services.change_notifier import ChangeNotifier
from src.app.services.clock import Clock
from src.app.use_cases.coupons import RedeemCoupon, RedeemCouponCommandDTO, RedeemCouponResponseDTO
from src.adapter.repositories.coupon_repository import SqlAlchemyCouponRepository
from src.adapter.repositories.coupon_use_repository import SqlAlchemyCouponUseRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import build_wallet_ledger, get_change_notifier, get_clock, get_session
from src.api.error import ClientError

router = APIRouter(prefix="/coupons", tags=["Coupons"])


@router.post(
    "/redeem",
    response_model=RedeemCouponResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {"description": "Unknown or inactive code (INVALID_CODE)"},
        409: {"description": "Already used by this account or usage cap reached"},
        410: {"description": "Coupon expired"},
        500: {"description": "Redemption recorded but credit not applied (PARTIAL_FAILURE)"},
    }
)
async def redeem_coupon(
    request: RedeemRequestSchema,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    """
    Redeem a coupon code for ALC.

    Codes are case-insensitive. Each account can redeem a coupon once.

    **Example request:**
    ```json
    {"account_id": "acc_123", "code": "welcome2026"}
    ```
    """
    use_case = RedeemCoupon(
        SqlAlchemyUnitOfWork(session),
        build_wallet_ledger(session, clock),
        SqlAlchemyCouponRepository(session),
        SqlAlchemyCouponUseRepository(session),
        notifier=notifier,
        timeout_seconds=ApplicationConfig.STORE_TIMEOUT_SECONDS,
    )
    result = await use_case.execute(
        RedeemCouponCommandDTO(account_id=request.account_id, code=request.code)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value
