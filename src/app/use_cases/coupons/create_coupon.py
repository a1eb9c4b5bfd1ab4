"""CreateCoupon Use Case"""

import logging
from typing import Optional
from libs.result import Result, Return
from src.app.errors import (
    DuplicateCodeError,
    InvalidAmountError,
    InvalidCodeError,
    LedgerError,
    store_error,
)
from src.app.repositories.admin_log_repository import AdminLogRepository
from src.app.repositories.coupon_repository import CouponRepository
from src.app.services.clock import Clock
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.admin.audit import record_admin_action
from src.app.use_cases.store_timeout import DEFAULT_STORE_TIMEOUT_SECONDS, with_store_timeout
from src.domain.admin_log import AdminAction
from src.domain.coupon import Coupon, normalize_code
from .dtos import CouponResponseDTO, CreateCouponCommandDTO, to_coupon_dto

logger = logging.getLogger(__name__)


class CreateCoupon:
    """
    Use Case: Create a coupon (administrators)

    Business Rules:
    1. Code is normalised to upper-case and must be unique
    2. alc_value > 0; max_uses, when set, >= 1
    3. An admin log entry commits with the coupon
    """

    def __init__(
        self,
        uow: UnitOfWork,
        coupon_repo: CouponRepository,
        clock: Clock,
        admin_log_repo: Optional[AdminLogRepository] = None,
        timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ):
        self.uow = uow
        self.coupon_repo = coupon_repo
        self.clock = clock
        self.admin_log_repo = admin_log_repo
        self.timeout_seconds = timeout_seconds

    async def execute(self, command: CreateCouponCommandDTO) -> Result[CouponResponseDTO]:
        code = normalize_code(command.code)

        try:
            coupon = await self._create(command, code)

        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to create coupon {code}: {e}")
            return Return.err(store_error(e, "Failed to create coupon"))

        logger.info(
            f"Coupon {code} created by {command.created_by or 'unknown'} "
            f"(value={command.alc_value}, max_uses={command.max_uses})"
        )
        return Return.ok(to_coupon_dto(coupon))

    @with_store_timeout
    async def _create(self, command: CreateCouponCommandDTO, code: str) -> Coupon:
        if not code:
            raise InvalidCodeError("Coupon code must not be empty")
        if command.alc_value <= 0:
            raise InvalidAmountError(
                f"Coupon value must be greater than 0, got {command.alc_value}"
            )
        if command.max_uses is not None and command.max_uses < 1:
            raise InvalidAmountError(
                f"max_uses must be at least 1, got {command.max_uses}"
            )

        now = self.clock.now()
        coupon = await self.coupon_repo.create(
            Coupon(
                code=code,
                alc_value=command.alc_value,
                is_active=command.is_active,
                max_uses=command.max_uses,
                current_uses=0,
                expires_at=command.expires_at,
                created_by=command.created_by,
                created_at=now,
                updated_at=now,
            )
        )
        if coupon is None:
            raise DuplicateCodeError(f"Coupon code {code} already exists")

        await record_admin_action(
            self.admin_log_repo,
            command.created_by,
            AdminAction.CREATE_COUPON,
            now=now,
            details={
                "coupon_id": coupon.id,
                "code": code,
                "alc_value": command.alc_value,
                "max_uses": command.max_uses,
            },
        )
        await self.uow.commit()
        return coupon
