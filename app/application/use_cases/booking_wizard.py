from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from app.application.dto.panel_result import PanelResult
from app.application.use_cases.address import AddressPanel
from app.application.use_cases.payment_flow import PaymentFlow
from app.application.use_cases.review import ReviewPanel
from app.application.use_cases.schedule import SchedulePanel
from app.application.use_cases.service_selection import ServiceSelectionPanel
from app.application.use_cases.wizard_controller import WizardController
from app.domain.entities.booking_draft import BookingDraft, WizardStep
from app.domain.entities.payment_state import PaymentState, PaymentStatus

STEP_COPY: dict[WizardStep, tuple[str, str]] = {
    WizardStep.services: ("Select Your Services", "Choose the cleaning services you need"),
    WizardStep.schedule: ("Choose Date & Time", "Select your preferred date and time"),
    WizardStep.address: ("Service Address", "Where should we provide the service?"),
    WizardStep.review: ("Review Your Booking", "Please review your booking details"),
    WizardStep.payment: ("Complete Payment", "Secure payment processing"),
}


@dataclass(frozen=True)
class CustomerContext:
    is_guest: bool = True
    user_id: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class StepView:
    step: WizardStep
    title: str
    description: str
    can_go_back: bool
    can_go_next: bool
    next_label: str | None
    draft: BookingDraft
    payment: PaymentState


class BookingWizard:
    """Root of one booking session: controller, step panels and payment flow."""

    def __init__(
        self,
        controller: WizardController,
        services: ServiceSelectionPanel,
        schedule: SchedulePanel,
        address: AddressPanel,
        review: ReviewPanel,
        payment: PaymentFlow,
        customer: CustomerContext,
    ) -> None:
        self.controller = controller
        self.services = services
        self.schedule = schedule
        self.address = address
        self.review = review
        self.payment = payment
        self.customer = customer
        self._panels = {
            WizardStep.services: services,
            WizardStep.schedule: schedule,
            WizardStep.address: address,
            WizardStep.review: review,
            WizardStep.payment: payment,
        }
        self._logger = logging.getLogger(__name__)
        controller.subscribe(self._on_draft_changed)

    @property
    def session_id(self) -> str:
        return self.controller.session_id

    def view(self) -> StepView:
        draft = self.controller.draft
        step = draft.current_step
        title, description = STEP_COPY[step]
        if step == WizardStep.payment:
            next_label = None
        elif step == WizardStep.review:
            next_label = "Proceed to Payment"
        else:
            next_label = "Next"
        return StepView(
            step=step,
            title=title,
            description=description,
            can_go_back=step != WizardStep.services,
            can_go_next=self.controller.can_advance(),
            next_label=next_label,
            draft=draft,
            payment=self.payment.state,
        )

    def load_reference_data(self) -> PanelResult:
        draft = self.controller.draft
        return self._panels[draft.current_step].load_reference_data(draft)

    def update_form_data(self, partial: Mapping[str, Any]) -> StepView:
        self.controller.update_form_data(partial)
        return self.view()

    def next_step(self) -> StepView:
        moved = self.controller.next_step()
        if moved:
            self._logger.info(
                "Wizard advanced",
                extra={"session_id": self.session_id, "step": self.controller.current_step.value},
            )
            if self.controller.current_step == WizardStep.payment:
                self.payment.start()
        return self.view()

    def prev_step(self) -> StepView:
        self.controller.prev_step()
        return self.view()

    def go_to_step(self, step: WizardStep) -> StepView:
        self.controller.go_to_step(step)
        return self.view()

    def abandon(self) -> StepView:
        self.controller.clear_draft()
        self.payment.reset()
        return self.view()

    def _on_draft_changed(self, draft: BookingDraft) -> None:
        # A finished payment belongs to the cleared draft; the next booking starts clean.
        if self.payment.state.status == PaymentStatus.success:
            self.payment.reset()
