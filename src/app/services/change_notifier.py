"""Change Notifier Interface

Defines the contract for publishing ledger state changes to observers.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Iterable, Optional
from pydantic import BaseModel, Field
from src.domain.base import utcnow

logger = logging.getLogger(__name__)


class ChangeEntity:
    WALLET = "wallet"
    TRANSACTION = "transaction"
    SUBSCRIPTION = "subscription"
    DAILY_LIMIT = "daily_limit"
    AD_COOLDOWN = "ad_cooldown"
    COUPON_USE = "coupon_use"

    ALL = frozenset({WALLET, TRANSACTION, SUBSCRIPTION, DAILY_LIMIT, AD_COOLDOWN, COUPON_USE})


class ChangeEvent(BaseModel):
    """A committed change to one account's ledger state"""

    account_id: str = Field(..., description="Account whose state changed")
    entity: str = Field(..., description="Changed entity (wallet, transaction, ...)")
    action: str = Field(..., description="insert or update")
    payload: Dict[str, Any] = Field(default_factory=dict, description="New state of the row")
    occurred_at: datetime = Field(default_factory=utcnow)


class ChangeNotifier(ABC):
    """
    Abstract change notifier

    Implementations can deliver events to:
    - In-process subscribers (server-sent events)
    - Logs
    - Webhooks
    """

    @abstractmethod
    async def publish(self, event: ChangeEvent) -> bool:
        """
        Publish one change event

        Args:
            event: ChangeEvent to deliver

        Returns:
            True if delivered, False otherwise
        """
        pass


async def notify_changes(notifier: Optional[ChangeNotifier], events: Iterable[ChangeEvent]) -> None:
    """Best-effort delivery: failures are logged, never raised"""
    if notifier is None:
        return
    for event in events:
        try:
            await notifier.publish(event)
        except Exception as e:
            logger.error(
                f"Change notification failed for account {event.account_id} "
                f"({event.entity}/{event.action}): {e}"
            )
