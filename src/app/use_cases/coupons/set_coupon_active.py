"""SetCouponActive Use Case"""

import logging
from typing import Optional
from libs.result import Result, Return
from src.app.errors import CouponNotFoundError, LedgerError, store_error
from src.app.repositories.admin_log_repository import AdminLogRepository
from src.app.repositories.coupon_repository import CouponRepository
from src.app.services.clock import Clock
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.admin.audit import record_admin_action
from src.app.use_cases.store_timeout import DEFAULT_STORE_TIMEOUT_SECONDS, with_store_timeout
from src.domain.admin_log import AdminAction
from src.domain.coupon import Coupon
from .dtos import CouponResponseDTO, SetCouponActiveCommandDTO, to_coupon_dto

logger = logging.getLogger(__name__)


class SetCouponActive:
    """Activate or deactivate a coupon; inactive coupons reject every redemption"""

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

    async def execute(self, command: SetCouponActiveCommandDTO) -> Result[CouponResponseDTO]:
        try:
            coupon = await self._set_active(command)
        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            return Return.err(store_error(e, "Failed to update coupon"))

        logger.info(
            f"Coupon {coupon.code} {'activated' if command.is_active else 'deactivated'}"
        )
        return Return.ok(to_coupon_dto(coupon))

    @with_store_timeout
    async def _set_active(self, command: SetCouponActiveCommandDTO) -> Coupon:
        now = self.clock.now()
        coupon = await self.coupon_repo.set_active(command.coupon_id, command.is_active, now)
        if coupon is None:
            raise CouponNotFoundError(f"Coupon {command.coupon_id} not found")

        await record_admin_action(
            self.admin_log_repo,
            command.admin_id,
            AdminAction.SET_COUPON_ACTIVE,
            now=now,
            details={"coupon_id": coupon.id, "code": coupon.code, "is_active": command.is_active},
        )
        await self.uow.commit()
        return coupon
