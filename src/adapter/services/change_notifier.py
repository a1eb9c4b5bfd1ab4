"""Change Notifier Implementations

Provides concrete implementations for publishing ledger change events.
"""

import asyncio
import logging
from collections import defaultdict
from typing import AsyncIterator, Dict, Iterable, List, Optional, Set
import httpx
from src.app.services.change_notifier import ChangeNotifier, ChangeEvent

logger = logging.getLogger(__name__)


class ChangeSubscription:
    """
    One observer's view of an account's change stream

    Events are buffered in a bounded queue; when the observer falls behind
    the oldest event is dropped.
    """

    def __init__(self, feed: "InMemoryChangeFeed", account_id: str, entities: Optional[Set[str]], max_size: int):
        self.feed = feed
        self.account_id = account_id
        self.entities = entities
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=max_size)
        self.dropped = 0

    def wants(self, event: ChangeEvent) -> bool:
        return self.entities is None or event.entity in self.entities

    def offer(self, event: ChangeEvent) -> None:
        if self.queue.full():
            self.queue.get_nowait()
            self.dropped += 1
        self.queue.put_nowait(event)

    async def get(self, timeout: Optional[float] = None) -> Optional[ChangeEvent]:
        """Next event, or None if timeout elapses first"""
        try:
            return await asyncio.wait_for(self.queue.get(), timeout)
        except asyncio.TimeoutError:
            return None

    async def __aiter__(self) -> AsyncIterator[ChangeEvent]:
        while True:
            yield await self.queue.get()

    def close(self) -> None:
        self.feed.unsubscribe(self)


class InMemoryChangeFeed(ChangeNotifier):
    """
    Fans events out to per-account subscriptions in this process

    Used by the server-sent events endpoint.
    """

    def __init__(self, max_queue_size: int = 100):
        self.max_queue_size = max_queue_size
        self._subscriptions: Dict[str, List[ChangeSubscription]] = defaultdict(list)

    def subscribe(self, account_id: str, entities: Optional[Iterable[str]] = None) -> ChangeSubscription:
        """
        Start observing an account

        Args:
            account_id: Account to observe
            entities: Entity names to receive (None = all)
        """
        subscription = ChangeSubscription(
            feed=self,
            account_id=account_id,
            entities=set(entities) if entities else None,
            max_size=self.max_queue_size,
        )
        self._subscriptions[account_id].append(subscription)
        return subscription

    def unsubscribe(self, subscription: ChangeSubscription) -> None:
        subscriptions = self._subscriptions.get(subscription.account_id, [])
        if subscription in subscriptions:
            subscriptions.remove(subscription)
        if not subscriptions:
            self._subscriptions.pop(subscription.account_id, None)

    def subscriber_count(self, account_id: str) -> int:
        return len(self._subscriptions.get(account_id, []))

    async def publish(self, event: ChangeEvent) -> bool:
        for subscription in list(self._subscriptions.get(event.account_id, [])):
            if subscription.wants(event):
                subscription.offer(event)
        return True


class LoggingChangeNotifier(ChangeNotifier):
    """
    Change notifier that logs events

    Useful for development and as an audit trail next to other channels.
    """

    async def publish(self, event: ChangeEvent) -> bool:
        logger.info(
            f"[CHANGE] Account: {event.account_id}, "
            f"Entity: {event.entity}, Action: {event.action}"
        )
        return True


class WebhookChangeNotifier(ChangeNotifier):
    """
    Change notifier that POSTs each event as JSON to a webhook URL
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook change notifier

        Args:
            webhook_url: URL to POST events to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def publish(self, event: ChangeEvent) -> bool:
        payload = {"type": "ledger_change", **event.model_dump(mode="json")}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                return True
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to deliver {event.entity} change for account {event.account_id} "
                f"to {self.webhook_url}: {e}"
            )
            return False


class CompositeChangeNotifier(ChangeNotifier):
    """
    Change notifier that delegates to multiple notifiers
    """

    def __init__(self, notifiers: List[ChangeNotifier]):
        self.notifiers = notifiers

    async def publish(self, event: ChangeEvent) -> bool:
        """
        Publish to every configured notifier

        Returns:
            True if at least one notifier succeeded, False otherwise
        """
        success = False
        for notifier in self.notifiers:
            try:
                if await notifier.publish(event):
                    success = True
            except Exception as e:
                logger.error(f"Change notifier {type(notifier).__name__} failed: {e}")
        return success


def create_change_notifier(
    feed: Optional[InMemoryChangeFeed] = None,
    webhook_url: Optional[str] = None,
) -> ChangeNotifier:
    """
    Factory function to create the change notifier

    Args:
        feed: In-process feed backing the event stream endpoint
        webhook_url: Optional webhook URL

    Returns:
        Logging notifier, or a composite of logging + feed + webhook
    """
    notifiers: List[ChangeNotifier] = [LoggingChangeNotifier()]

    if feed is not None:
        notifiers.append(feed)

    if webhook_url:
        notifiers.append(WebhookChangeNotifier(webhook_url))

    if len(notifiers) == 1:
        return notifiers[0]

    return CompositeChangeNotifier(notifiers)
