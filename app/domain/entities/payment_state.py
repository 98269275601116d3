from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PaymentStatus(str, Enum):
    idle = "idle"
    creating_booking = "creating_booking"
    processing_payment = "processing_payment"
    success = "success"
    error = "error"


@dataclass(frozen=True)
class BookingCreated:
    booking_id: str
    payment_reference: str
    total_amount: float


@dataclass(frozen=True)
class PaymentSession:
    reference: str
    authorization_url: str | None = None
    access_code: str | None = None


@dataclass(frozen=True)
class PaymentState:
    status: PaymentStatus = PaymentStatus.idle
    booking: BookingCreated | None = None
    session: PaymentSession | None = None
    error_message: str | None = None
    error_kind: str | None = None  # "submission", "payment"
