"""Quota API Routes

FastAPI routes for the daily question quota and action charging.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.schemas.quota_request import ChargeRequestSchema, EstimateRequestSchema
from src.app.services.change_notifier import ChangeNotifier
from src.app.services.clock import Clock
from src.app.use_cases.quota import (
    CheckQuota,
    RecordQuestion,
    ChargeAction,
    EstimateActionCost,
    QuotaStatusDTO,
    EstimateCommandDTO,
    EstimateResponseDTO,
    ChargeActionCommandDTO,
    ChargeActionResponseDTO,
)
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

router = APIRouter(prefix="/quota", tags=["Quota"])


@router.post(
    "/estimate",
    response_model=EstimateResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def estimate_action_cost(request: EstimateRequestSchema):
    """
    Price a list of actions without charging anything.

    **Example request:**
    ```json
    {"actions": ["chat", "chat", "image"]}
    ```
    """
    use_case = EstimateActionCost(cost_table=ApplicationConfig.ACTION_COSTS)
    result = await use_case.execute(EstimateCommandDTO(actions=request.actions))
    return result.value


@router.post(
    "/charge",
    response_model=ChargeActionResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        429: {
            "description": "Quota exhausted and balance too low",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "QUOTA_EXCEEDED",
                            "message": "Daily question limit reached and balance too low for video (cost 75 ALC)"
                        }
                    }
                }
            }
        }
    }
)
async def charge_action(
    request: ChargeRequestSchema,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    """
    Gate one content-generation action.

    The cost is debited when the wallet covers it; otherwise the daily
    question quota must allow the action. Either way one question is counted.
    """
    use_case = ChargeAction(
        SqlAlchemyUnitOfWork(session),
        build_wallet_ledger(session, clock),
        SqlAlchemySubscriptionRepository(session),
        settings=quota_settings,
        cost_table=ApplicationConfig.ACTION_COSTS,
        notifier=notifier,
        timeout_seconds=ApplicationConfig.STORE_TIMEOUT_SECONDS,
    )
    result = await use_case.execute(
        ChargeActionCommandDTO(
            account_id=request.account_id,
            action=request.action,
            content=request.content,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{account_id}",
    response_model=QuotaStatusDTO,
    status_code=status.HTTP_200_OK,
)
async def get_quota(
    account_id: str,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
):
    """Daily question quota and whether the account can act right now."""
    use_case = CheckQuota(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemySubscriptionRepository(session),
        clock,
        settings=quota_settings,
        timeout_seconds=ApplicationConfig.STORE_TIMEOUT_SECONDS,
    )
    result = await use_case.execute(account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{account_id}/questions",
    response_model=QuotaStatusDTO,
    status_code=status.HTTP_200_OK,
)
async def record_question(
    account_id: str,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    """Count one question against today's quota."""
    use_case = RecordQuestion(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemySubscriptionRepository(session),
        clock,
        settings=quota_settings,
        notifier=notifier,
        timeout_seconds=ApplicationConfig.STORE_TIMEOUT_SECONDS,
    )
    result = await use_case.execute(account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
