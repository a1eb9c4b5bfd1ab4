"""
Estimate Action Cost Use Case

Prices a list of content-generation actions without mutating any balance.
"""
from typing import Dict, Optional
from libs.result import Result, Return
from .action_costs import ACTION_COST_TABLE, cost_of
from .dtos import EstimateCommandDTO, EstimateResponseDTO


class EstimateActionCost:
    """
    Use case: Preflight ALC cost estimation

    Read-only: nothing is debited or counted.
    """

    def __init__(self, cost_table: Optional[Dict[str, int]] = None):
        """
        Args:
            cost_table: Optional custom cost table. Defaults to ACTION_COST_TABLE.
        """
        self.cost_table = cost_table or ACTION_COST_TABLE

    async def execute(self, command: EstimateCommandDTO) -> Result[EstimateResponseDTO]:
        breakdown: Dict[str, int] = {}
        total_cost = 0

        for action in command.actions:
            action_cost = cost_of(action, self.cost_table)
            breakdown[action.value] = breakdown.get(action.value, 0) + action_cost
            total_cost += action_cost

        return Return.ok(
            EstimateResponseDTO(
                estimated_cost=total_cost,
                breakdown=breakdown,
            )
        )
