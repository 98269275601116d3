from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date


class AvailabilityPort(ABC):
    @abstractmethod
    def unavailable_slots(self, service_date: date, slots: list[str]) -> set[str]:
        """Subset of the given HH:MM slots that cannot be booked on service_date."""
        raise NotImplementedError
