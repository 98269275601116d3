from __future__ import annotations

from datetime import date, datetime, timedelta

SLOT_START = "08:00"
SLOT_END = "18:00"
SLOT_MINUTES = 30


def build_slot_grid(start: str = SLOT_START, end: str = SLOT_END, step_minutes: int = SLOT_MINUTES) -> list[str]:
    """Fixed HH:MM grid from start to end inclusive."""
    current = datetime.strptime(start, "%H:%M")
    last = datetime.strptime(end, "%H:%M")
    slots: list[str] = []
    while current <= last:
        slots.append(current.strftime("%H:%M"))
        current += timedelta(minutes=step_minutes)
    return slots


SLOT_GRID: tuple[str, ...] = tuple(build_slot_grid())


def date_window(today: date, window_days: int = 90) -> tuple[date, date]:
    """Bookable range: tomorrow through tomorrow + window_days."""
    first = today + timedelta(days=1)
    return first, first + timedelta(days=window_days)


def parse_service_date(value: str) -> date | None:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        return None


def format_slot(slot: str) -> str:
    """'13:30' -> '1:30 PM'."""
    hours, minutes = slot.split(":")
    hour = int(hours)
    ampm = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minutes} {ampm}"
