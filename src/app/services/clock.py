"""Clock Interface

All engines read time through a Clock so tests can freeze and advance it.
Timestamps are naive UTC; the calendar day is the UTC day.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime


class Clock(ABC):

    @abstractmethod
    def now(self) -> datetime:
        """Current naive UTC timestamp"""
        pass

    def today(self) -> date:
        return self.now().date()
