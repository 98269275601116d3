from __future__ import annotations

import logging
from dataclasses import replace

from app.application.dto.panel_result import PanelLoaded, PanelResult
from app.application.exceptions import (
    BookingRejectedError,
    CollaboratorUnavailableError,
    PaymentInitiationError,
)
from app.application.use_cases.submission import BookingSubmissionAdapter
from app.application.use_cases.wizard_controller import WizardController
from app.domain.entities.booking_draft import BookingDraft, WizardStep
from app.domain.entities.payment_state import PaymentState, PaymentStatus

GENERIC_BOOKING_ERROR = "Failed to create booking"
GENERIC_PAYMENT_ERROR = "Payment failed. Please try again."
SIGN_IN_REQUIRED = "Please sign in to complete your payment"


class PaymentFlow:
    """
    idle -> creating_booking -> processing_payment -> success | error

    error returns to idle through try_again(); success holds until reset().
    A booking, once created, is kept across close/error/try_again so a
    retried payment reuses its id and reference.
    """

    def __init__(
        self,
        controller: WizardController,
        submission: BookingSubmissionAdapter,
        payer_email: str | None,
    ) -> None:
        self._controller = controller
        self._submission = submission
        self._payer_email = payer_email
        self._state = PaymentState()
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> PaymentState:
        return self._state

    def load_reference_data(self, draft: BookingDraft) -> PanelResult:
        return PanelLoaded(self._state)

    def start(self) -> PaymentState:
        if self._controller.current_step != WizardStep.payment or self._state.status != PaymentStatus.idle:
            self._ignored("start")
            return self._state
        if not self._payer_email:
            self._fail(SIGN_IN_REQUIRED, kind="payment")
            return self._state

        booking = self._state.booking
        if booking is None:
            self._transition(PaymentStatus.creating_booking)
            try:
                booking = self._submission.create_booking(self._controller.draft)
            except BookingRejectedError as e:
                self._fail(e.message or GENERIC_BOOKING_ERROR, kind="submission")
                return self._state
            except CollaboratorUnavailableError:
                self._fail(GENERIC_BOOKING_ERROR, kind="submission")
                return self._state
            self._state = replace(self._state, booking=booking)

        try:
            session = self._submission.initiate_payment(
                booking_id=booking.booking_id,
                reference=booking.payment_reference,
                amount=booking.total_amount,
                payer_email=self._payer_email,
                metadata={"user_id": "guest" if self._controller.draft.is_guest else "authenticated"},
            )
        except (PaymentInitiationError, CollaboratorUnavailableError) as e:
            self._fail(str(e) or GENERIC_PAYMENT_ERROR, kind="payment")
            return self._state

        self._state = replace(self._state, session=session)
        self._transition(PaymentStatus.processing_payment)
        return self._state

    def on_success(self, reference: str) -> PaymentState:
        if self._state.status != PaymentStatus.processing_payment or self._state.booking is None:
            self._ignored("success")
            return self._state
        if reference != self._state.booking.payment_reference:
            self._logger.warning(
                "Payment success for unexpected reference",
                extra={"session_id": self._controller.session_id, "reference": reference},
            )
            return self._state
        self._controller.clear_draft()
        self._transition(PaymentStatus.success)
        return self._state

    def on_close(self) -> PaymentState:
        if self._state.status != PaymentStatus.processing_payment:
            self._ignored("close")
            return self._state
        self._transition(PaymentStatus.idle)
        return self._state

    def on_error(self, message: str | None = None) -> PaymentState:
        if self._state.status != PaymentStatus.processing_payment:
            self._ignored("error")
            return self._state
        self._fail(message or GENERIC_PAYMENT_ERROR, kind="payment")
        return self._state

    def try_again(self) -> PaymentState:
        if self._state.status != PaymentStatus.error:
            self._ignored("try_again")
            return self._state
        self._state = replace(self._state, error_message=None, error_kind=None)
        self._transition(PaymentStatus.idle)
        return self._state

    def reset(self) -> PaymentState:
        """Forget any booking and checkout session; the next start() creates a new booking."""
        self._state = PaymentState()
        self._logger.info("Payment state reset", extra={"session_id": self._controller.session_id})
        return self._state

    def _transition(self, status: PaymentStatus) -> None:
        self._state = replace(self._state, status=status)
        booking = self._state.booking
        self._logger.info(
            "Payment step transition",
            extra={
                "session_id": self._controller.session_id,
                "status": status.value,
                "booking_id": booking.booking_id if booking else None,
                "reference": booking.payment_reference if booking else None,
            },
        )

    def _fail(self, message: str, kind: str) -> None:
        self._state = replace(self._state, error_message=message, error_kind=kind)
        self._transition(PaymentStatus.error)

    def _ignored(self, action: str) -> None:
        self._logger.debug(
            "Payment action ignored",
            extra={"session_id": self._controller.session_id, "status": self._state.status.value, "reason": action},
        )
