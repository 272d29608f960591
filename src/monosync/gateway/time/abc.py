"""Time operations abstraction for testing."""

from abc import ABC, abstractmethod
from datetime import datetime


class Time(ABC):
    """Abstract time operations.

    Lets tests substitute sleeps and clock reads without real delays.
    """

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Sleep for the given number of seconds."""
        ...

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time (timezone-aware, UTC)."""
        ...
