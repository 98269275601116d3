from __future__ import annotations

from datetime import date

from app.application.ports.availability import AvailabilityPort

WEEKEND_BLOCKED = ("08:00", "08:30", "17:30", "18:00")


class RulesAvailability(AvailabilityPort):
    """Weekends lose the earliest and latest slots; specific dates can block more."""

    def __init__(self, blocked: dict[str, set[str]] | None = None) -> None:
        self._blocked = {key: set(value) for key, value in (blocked or {}).items()}

    def block(self, service_date: date, slots: set[str]) -> None:
        self._blocked.setdefault(service_date.isoformat(), set()).update(slots)

    def unavailable_slots(self, service_date: date, slots: list[str]) -> set[str]:
        unavailable: set[str] = set()
        if service_date.weekday() >= 5:
            unavailable.update(WEEKEND_BLOCKED)
        unavailable.update(self._blocked.get(service_date.isoformat(), set()))
        return unavailable.intersection(slots)
