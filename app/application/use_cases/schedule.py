from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable

from app.application.dto.panel_result import PanelFailed, PanelLoaded, PanelResult
from app.application.exceptions import CollaboratorUnavailableError, InvalidSelectionError
from app.application.ports.availability import AvailabilityPort
from app.application.use_cases.wizard_controller import WizardController
from app.application.utils.schedule import SLOT_GRID, date_window, parse_service_date
from app.domain.entities.booking_draft import BookingDraft


@dataclass(frozen=True)
class ScheduleData:
    min_date: date
    max_date: date
    slots: tuple[str, ...]
    available_slots: tuple[str, ...]


class SchedulePanel:
    def __init__(
        self,
        controller: WizardController,
        availability: AvailabilityPort,
        today: Callable[[], date] = date.today,
        window_days: int = 90,
    ) -> None:
        self._controller = controller
        self._availability = availability
        self._today = today
        self._window_days = window_days
        self._logger = logging.getLogger(__name__)

    def date_window(self) -> tuple[date, date]:
        return date_window(self._today(), self._window_days)

    def available_slots(self, service_date: date) -> list[str]:
        unavailable = self._availability.unavailable_slots(service_date, list(SLOT_GRID))
        return [slot for slot in SLOT_GRID if slot not in unavailable]

    def load_reference_data(self, draft: BookingDraft) -> PanelResult:
        min_date, max_date = self.date_window()
        selected = parse_service_date(draft.service_date)
        available: tuple[str, ...] = ()
        if selected is not None:
            try:
                available = tuple(self.available_slots(selected))
            except CollaboratorUnavailableError as e:
                self._logger.warning(
                    "Error fetching availability",
                    extra={"session_id": self._controller.session_id, "reason": str(e)},
                )
                return PanelFailed(message="Could not load available times. Please try again.")
        return PanelLoaded(
            ScheduleData(min_date=min_date, max_date=max_date, slots=SLOT_GRID, available_slots=available)
        )

    def select_date(self, service_date: str) -> BookingDraft:
        parsed = parse_service_date(service_date)
        if parsed is None:
            raise InvalidSelectionError(f"Invalid date: {service_date!r}")
        min_date, max_date = self.date_window()
        if not (min_date <= parsed <= max_date):
            raise InvalidSelectionError("Select a date between tomorrow and 3 months from now")

        draft = self._controller.draft
        changes = {"service_date": parsed.isoformat()}
        if draft.service_time and draft.service_date != changes["service_date"]:
            changes["service_time"] = ""
        self._controller.update_form_data(changes)
        return self._controller.draft

    def select_time(self, service_time: str) -> BookingDraft:
        if service_time not in SLOT_GRID:
            raise InvalidSelectionError(f"Invalid time slot: {service_time!r}")
        selected = parse_service_date(self._controller.draft.service_date)
        if selected is None:
            raise InvalidSelectionError("Select a date before choosing a time")
        if service_time not in self.available_slots(selected):
            raise InvalidSelectionError(f"{service_time} is not available on {selected.isoformat()}")
        self._controller.update_form_data({"service_time": service_time})
        return self._controller.draft
