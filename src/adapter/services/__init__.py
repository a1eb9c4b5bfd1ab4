from .unit_of_work import SqlAlchemyUnitOfWork
from .clock import SystemClock
from .change_notifier import (
    InMemoryChangeFeed,
    ChangeSubscription,
    LoggingChangeNotifier,
    WebhookChangeNotifier,
    CompositeChangeNotifier,
    create_change_notifier,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "SystemClock",
    "InMemoryChangeFeed",
    "ChangeSubscription",
    "LoggingChangeNotifier",
    "WebhookChangeNotifier",
    "CompositeChangeNotifier",
    "create_change_notifier",
]
