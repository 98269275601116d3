from __future__ import annotations

import logging
import time
from typing import Any, Callable

from app.application.exceptions import BookingRejectedError, CollaboratorUnavailableError
from app.application.ports.booking_endpoint import BookingEndpointPort
from app.application.ports.payment import PaymentPort, PaymentRequest
from app.application.utils.draft_payload import draft_to_form_data
from app.application.utils.pricing import to_minor_units
from app.domain.entities.booking_draft import BookingDraft
from app.domain.entities.payment_state import BookingCreated, PaymentSession


class BookingSubmissionAdapter:
    """Hands a completed draft to the booking endpoint and the payment collaborator."""

    def __init__(
        self,
        endpoint: BookingEndpointPort,
        payments: PaymentPort,
        max_attempts: int = 3,
        backoff_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._endpoint = endpoint
        self._payments = payments
        self._max_attempts = max(1, max_attempts)
        self._backoff_seconds = backoff_seconds
        self._sleep = sleep
        self._logger = logging.getLogger(__name__)

    def create_booking(self, draft: BookingDraft) -> BookingCreated:
        """
        Create the booking, retrying transient failures with exponential backoff.
        BookingRejectedError is raised immediately; CollaboratorUnavailableError
        is raised once the attempts are used up.
        """
        form_data = draft_to_form_data(draft)
        for attempt in range(self._max_attempts):
            try:
                created = self._endpoint.create_booking(form_data, is_guest=draft.is_guest)
            except BookingRejectedError:
                raise
            except CollaboratorUnavailableError as e:
                if attempt == self._max_attempts - 1:
                    self._logger.error(
                        "Booking creation failed after retries",
                        extra={"reason": str(e), "status": f"attempts={self._max_attempts}"},
                    )
                    raise
                delay = self._backoff_seconds * (2**attempt)
                self._logger.warning(
                    "Booking creation attempt failed, retrying",
                    extra={"reason": str(e), "status": f"attempt={attempt + 1}"},
                )
                self._sleep(delay)
                continue

            self._logger.info(
                "Booking created",
                extra={"booking_id": created.booking_id, "reference": created.payment_reference},
            )
            return created
        raise CollaboratorUnavailableError("Booking endpoint unavailable")

    def initiate_payment(
        self,
        booking_id: str,
        reference: str,
        amount: float,
        payer_email: str,
        metadata: dict[str, Any] | None = None,
    ) -> PaymentSession:
        request = PaymentRequest(
            amount_minor_units=to_minor_units(amount),
            payer_email=payer_email,
            reference=reference,
            metadata={"booking_id": booking_id, **(metadata or {})},
        )
        session = self._payments.initialize(request)
        self._logger.info("Payment initiated", extra={"booking_id": booking_id, "reference": reference})
        return session
