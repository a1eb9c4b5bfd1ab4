"""Admin API Routes

Coupon management, manual balance adjustments, plan changes and the
admin audit log. Every mutation here writes an admin log entry in the same
store transaction.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.schemas.admin_request import AdjustBalanceRequestSchema, ChangePlanRequestSchema
from src.api.schemas.coupon_request import CreateCouponRequestSchema, UpdateCouponRequestSchema
from src.app.services.change_notifier import ChangeNotifier
from src.app.services.clock import Clock
from src.app.use_cases.coupons import (
    CreateCoupon,
    SetCouponActive,
    CreateCouponCommandDTO,
    SetCouponActiveCommandDTO,
    CouponResponseDTO,
)
from src.app.use_cases.admin import AdminLogListResponseDTO, ListAdminLogs, ListAdminLogsQueryDTO
from src.app.use_cases.quota import ChangePlan, ChangePlanCommandDTO, QuotaStatusDTO
from src.app.use_cases.wallet import AdjustBalance, AdjustBalanceCommandDTO, TransactionResponseDTO
from src.adapter.repositories.admin_log_repository import SqlAlchemyAdminLogRepository
from src.adapter.repositories.coupon_repository import SqlAlchemyCouponRepository
from src.adapter.repositories.subscription_repository import SqlAlchemySubscriptionRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import (
    build_wallet_ledger,
    get_change_notifier,
    get_clock,
    get_session,
    quota_settings,
)
from src.api.error import ClientError

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/coupons",
    response_model=CouponResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def create_coupon(
    request: CreateCouponRequestSchema,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
):
    """Create a coupon. The code is stored upper-case and must be unique."""
    use_case = CreateCoupon(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCouponRepository(session),
        clock,
        admin_log_repo=SqlAlchemyAdminLogRepository(session),
        timeout_seconds=ApplicationConfig.STORE_TIMEOUT_SECONDS,
    )
    result = await use_case.execute(
        CreateCouponCommandDTO(
            code=request.code,
            alc_value=request.alc_value,
            max_uses=request.max_uses,
            expires_at=request.expires_at,
            created_by=request.created_by,
            is_active=request.is_active,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.patch(
    "/coupons/{coupon_id}",
    response_model=CouponResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def update_coupon(
    coupon_id: int,
    request: UpdateCouponRequestSchema,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
):
    """Activate or deactivate a coupon."""
    use_case = SetCouponActive(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCouponRepository(session),
        clock,
        admin_log_repo=SqlAlchemyAdminLogRepository(session),
        timeout_seconds=ApplicationConfig.STORE_TIMEOUT_SECONDS,
    )
    result = await use_case.execute(
        SetCouponActiveCommandDTO(
            coupon_id=coupon_id,
            is_active=request.is_active,
            admin_id=request.admin_id,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/wallets/adjust",
    response_model=TransactionResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def adjust_balance(
    request: AdjustBalanceRequestSchema,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    """
    Manually credit (amount > 0) or debit (amount < 0) a wallet.

    Recorded as admin_credit / admin_debit with the administrator id.
    """
    use_case = AdjustBalance(
        SqlAlchemyUnitOfWork(session),
        build_wallet_ledger(session, clock),
        notifier=notifier,
        admin_log_repo=SqlAlchemyAdminLogRepository(session),
        timeout_seconds=ApplicationConfig.STORE_TIMEOUT_SECONDS,
    )
    result = await use_case.execute(
        AdjustBalanceCommandDTO(
            account_id=request.account_id,
            amount=request.amount,
            admin_id=request.admin_id,
            reason=request.reason,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.put(
    "/subscriptions/{account_id}",
    response_model=QuotaStatusDTO,
    status_code=status.HTTP_200_OK,
)
async def change_plan(
    account_id: str,
    request: ChangePlanRequestSchema,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    """
    Change the account's plan.

    Questions already asked today still count; only the limit changes.
    """
    use_case = ChangePlan(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemySubscriptionRepository(session),
        clock,
        settings=quota_settings,
        notifier=notifier,
        admin_log_repo=SqlAlchemyAdminLogRepository(session),
        timeout_seconds=ApplicationConfig.STORE_TIMEOUT_SECONDS,
    )
    result = await use_case.execute(
        ChangePlanCommandDTO(
            account_id=account_id,
            plan=request.plan,
            expires_at=request.expires_at,
            admin_id=request.admin_id,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/logs",
    response_model=AdminLogListResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_admin_logs(
    account_id: Optional[str] = Query(default=None, description="Only entries targeting this account"),
    admin_id: Optional[str] = Query(default=None, description="Only entries by this administrator"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    """Administrator actions, newest first."""
    use_case = ListAdminLogs(SqlAlchemyAdminLogRepository(session))
    result = await use_case.execute(
        ListAdminLogsQueryDTO(
            target_account_id=account_id,
            admin_id=admin_id,
            limit=limit,
            offset=offset,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value
