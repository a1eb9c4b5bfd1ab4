"""ALC cost per content-generation action"""

from enum import Enum
from typing import Dict


class ActionType(str, Enum):
    CHAT = "chat"
    IMAGE = "image"
    CODE = "code"
    VIDEO = "video"


# Overridable through ApplicationConfig.ACTION_COSTS
ACTION_COST_TABLE: Dict[str, int] = {
    ActionType.CHAT.value: 5,
    ActionType.IMAGE.value: 25,
    ActionType.CODE.value: 45,
    ActionType.VIDEO.value: 75,
}


def cost_of(action: ActionType, cost_table: Dict[str, int]) -> int:
    return cost_table.get(action.value, ACTION_COST_TABLE[action.value])
