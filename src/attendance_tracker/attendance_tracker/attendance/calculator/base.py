from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import time


class HoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for worked hours)."""

    @abstractmethod
    def total_hours(self, *, check_in: time, check_out: time, break_minutes: float) -> float:
        raise NotImplementedError

    @abstractmethod
    def overtime_hours(self, total_hours: float) -> float:
        raise NotImplementedError
