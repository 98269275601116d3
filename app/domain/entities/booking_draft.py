from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class WizardStep(str, Enum):
    services = "services"
    schedule = "schedule"
    address = "address"
    review = "review"
    payment = "payment"

    @property
    def position(self) -> int:
        return STEP_ORDER.index(self)


STEP_ORDER: tuple[WizardStep, ...] = (
    WizardStep.services,
    WizardStep.schedule,
    WizardStep.address,
    WizardStep.review,
    WizardStep.payment,
)

FREQUENCIES = ("once", "weekly", "biweekly", "monthly")
ADDRESS_TYPES = ("home", "office", "other")


@dataclass(frozen=True)
class ServiceLine:
    service_item_id: str
    quantity: int


@dataclass(frozen=True)
class ExtraLine:
    service_extra_id: str
    quantity: int


@dataclass(frozen=True)
class NewAddress:
    name: str
    address_line_1: str
    city: str
    state: str
    postal_code: str
    type: str = "home"  # "home", "office", "other"
    address_line_2: str | None = None
    country: str = "NG"

    def missing_fields(self) -> list[str]:
        required = {
            "name": self.name,
            "address_line_1": self.address_line_1,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
        }
        return [key for key, value in required.items() if not (value or "").strip()]


@dataclass(frozen=True)
class BookingDraft:
    services: tuple[ServiceLine, ...] = ()
    extras: tuple[ExtraLine, ...] = ()
    service_date: str = ""  # YYYY-MM-DD
    service_time: str = ""  # HH:MM
    address_id: str | None = None
    new_address: NewAddress | None = None
    notes: str = ""
    frequency: str = "once"
    current_step: WizardStep = WizardStep.services
    is_guest: bool = True

    @staticmethod
    def empty(is_guest: bool = True) -> "BookingDraft":
        return BookingDraft(is_guest=is_guest)

    def service_quantity(self, service_item_id: str) -> int:
        for line in self.services:
            if line.service_item_id == service_item_id:
                return line.quantity
        return 0

    def extra_quantity(self, service_extra_id: str) -> int:
        for line in self.extras:
            if line.service_extra_id == service_extra_id:
                return line.quantity
        return 0
