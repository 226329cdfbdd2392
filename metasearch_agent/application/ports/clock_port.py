from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime


class ClockPort(ABC):
    """Port for time-related operations.

    The answer prompt carries the current date; tests pin it with a fake.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return current UTC datetime."""
        ...
