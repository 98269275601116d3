from __future__ import annotations

from app.domain.entities.booking_draft import BookingDraft, WizardStep


def is_step_valid(step: WizardStep, draft: BookingDraft) -> bool:
    """Whether the wizard may move forward from `step` with the given draft."""
    if step == WizardStep.services:
        return len(draft.services) > 0
    if step == WizardStep.schedule:
        return draft.service_date != "" and draft.service_time != ""
    if step == WizardStep.address:
        return draft.address_id is not None or draft.new_address is not None
    # Review is informational; payment validation lives in the payment collaborator.
    return True
