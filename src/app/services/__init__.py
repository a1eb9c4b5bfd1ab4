from .unit_of_work import UnitOfWork
from .clock import Clock
from .change_notifier import ChangeNotifier, ChangeEvent, ChangeEntity, notify_changes

__all__ = [
    "UnitOfWork",
    "Clock",
    "ChangeNotifier",
    "ChangeEvent",
    "ChangeEntity",
    "notify_changes",
]
