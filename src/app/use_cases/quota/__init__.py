from .check_quota import CheckQuota
from .record_question import RecordQuestion
from .change_plan import ChangePlan
from .charge_action import ChargeAction
from .estimate_action_cost import EstimateActionCost
from .action_costs import ActionType, ACTION_COST_TABLE
from .quota_settings import QuotaSettings
from .dtos import (
    QuotaStatusDTO,
    ChangePlanCommandDTO,
    EstimateCommandDTO,
    EstimateResponseDTO,
    ChargeActionCommandDTO,
    ChargeActionResponseDTO,
)

__all__ = [
    "CheckQuota",
    "RecordQuestion",
    "ChangePlan",
    "ChargeAction",
    "EstimateActionCost",
    "ActionType",
    "ACTION_COST_TABLE",
    "QuotaSettings",
    "QuotaStatusDTO",
    "ChangePlanCommandDTO",
    "EstimateCommandDTO",
    "EstimateResponseDTO",
    "ChargeActionCommandDTO",
    "ChargeActionResponseDTO",
]
