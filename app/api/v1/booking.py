from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from app.api.v1.schemas import (
    DateSelectionSchema,
    DraftStatusSchema,
    DraftUpdateSchema,
    GoToStepSchema,
    NewAddressSelectionSchema,
    NotesSchema,
    OpenSessionRequestSchema,
    PaymentErrorSchema,
    PaymentSuccessSchema,
    QuantitySchema,
    ReferenceDataSchema,
    SavedAddressSchema,
    StepViewSchema,
    TimeSelectionSchema,
    reference_data_schema,
    step_view_schema,
)
from app.application.exceptions import CollaboratorUnavailableError, InvalidSelectionError
from app.application.use_cases.booking_wizard import BookingWizard, CustomerContext
from app.wiring.dependencies import get_draft_store, get_wizard, open_wizard


router = APIRouter(prefix="/api/v1/booking")
logger = logging.getLogger(__name__)


def _wizard(session_id: str) -> BookingWizard:
    wizard = get_wizard(session_id)
    if wizard is None:
        raise HTTPException(status_code=404, detail="Booking session not found")
    return wizard


def _view(wizard: BookingWizard) -> StepViewSchema:
    return step_view_schema(wizard.session_id, wizard.view())


def _panel_action(wizard: BookingWizard, action, *args) -> StepViewSchema:
    try:
        action(*args)
    except InvalidSelectionError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except CollaboratorUnavailableError as e:
        logger.warning("Panel action unavailable", extra={"session_id": wizard.session_id, "reason": str(e)})
        raise HTTPException(status_code=503, detail=str(e))
    return _view(wizard)


@router.post("/sessions", response_model=StepViewSchema)
def open_session(payload: OpenSessionRequestSchema) -> StepViewSchema:
    customer = CustomerContext(is_guest=payload.is_guest, user_id=payload.user_id, email=payload.email)
    return _view(open_wizard(payload.session_id, customer))


@router.get("/sessions/{session_id}", response_model=StepViewSchema)
def get_session(session_id: str) -> StepViewSchema:
    return _view(_wizard(session_id))


@router.get("/sessions/{session_id}/draft-status", response_model=DraftStatusSchema)
def draft_status(session_id: str) -> DraftStatusSchema:
    store = get_draft_store()
    try:
        # load() discards malformed data, so has_draft only reports drafts that can be restored.
        has_draft = store.load(session_id) is not None
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return DraftStatusSchema(
        session_id=session_id,
        has_draft=has_draft,
        age_hours=store.draft_age_hours(session_id) if has_draft else 0,
    )


@router.patch("/sessions/{session_id}", response_model=StepViewSchema)
def update_draft(session_id: str, payload: DraftUpdateSchema) -> StepViewSchema:
    wizard = _wizard(session_id)
    return step_view_schema(session_id, wizard.update_form_data(payload.to_partial()))


@router.delete("/sessions/{session_id}", response_model=StepViewSchema)
def abandon_draft(session_id: str) -> StepViewSchema:
    wizard = _wizard(session_id)
    return step_view_schema(session_id, wizard.abandon())


@router.post("/sessions/{session_id}/next", response_model=StepViewSchema)
def next_step(session_id: str) -> StepViewSchema:
    wizard = _wizard(session_id)
    return step_view_schema(session_id, wizard.next_step())


@router.post("/sessions/{session_id}/prev", response_model=StepViewSchema)
def prev_step(session_id: str) -> StepViewSchema:
    wizard = _wizard(session_id)
    return step_view_schema(session_id, wizard.prev_step())


@router.post("/sessions/{session_id}/goto", response_model=StepViewSchema)
def go_to_step(session_id: str, payload: GoToStepSchema) -> StepViewSchema:
    wizard = _wizard(session_id)
    return step_view_schema(session_id, wizard.go_to_step(payload.step))


@router.get("/sessions/{session_id}/reference-data", response_model=ReferenceDataSchema)
def reference_data(session_id: str) -> ReferenceDataSchema:
    wizard = _wizard(session_id)
    return reference_data_schema(session_id, wizard.controller.current_step, wizard.load_reference_data())


@router.put("/sessions/{session_id}/services/{service_item_id}", response_model=StepViewSchema)
def set_service_quantity(session_id: str, service_item_id: str, payload: QuantitySchema) -> StepViewSchema:
    wizard = _wizard(session_id)
    return _panel_action(wizard, wizard.services.set_service_quantity, service_item_id, payload.quantity)


@router.put("/sessions/{session_id}/extras/{service_extra_id}", response_model=StepViewSchema)
def set_extra_quantity(session_id: str, service_extra_id: str, payload: QuantitySchema) -> StepViewSchema:
    wizard = _wizard(session_id)
    return _panel_action(wizard, wizard.services.set_extra_quantity, service_extra_id, payload.quantity)


@router.post("/sessions/{session_id}/schedule/date", response_model=StepViewSchema)
def select_date(session_id: str, payload: DateSelectionSchema) -> StepViewSchema:
    wizard = _wizard(session_id)
    return _panel_action(wizard, wizard.schedule.select_date, payload.service_date.isoformat())


@router.post("/sessions/{session_id}/schedule/time", response_model=StepViewSchema)
def select_time(session_id: str, payload: TimeSelectionSchema) -> StepViewSchema:
    wizard = _wizard(session_id)
    return _panel_action(wizard, wizard.schedule.select_time, payload.service_time)


@router.post("/sessions/{session_id}/address/saved", response_model=StepViewSchema)
def select_saved_address(session_id: str, payload: SavedAddressSchema) -> StepViewSchema:
    wizard = _wizard(session_id)
    return _panel_action(wizard, wizard.address.select_saved, payload.address_id)


@router.post("/sessions/{session_id}/address/new", response_model=StepViewSchema)
def use_new_address(session_id: str, payload: NewAddressSelectionSchema) -> StepViewSchema:
    wizard = _wizard(session_id)
    action = wizard.address.save_new_address if payload.save else wizard.address.use_new_address
    return _panel_action(wizard, action, payload.address.to_entity())


@router.post("/sessions/{session_id}/notes", response_model=StepViewSchema)
def set_notes(session_id: str, payload: NotesSchema) -> StepViewSchema:
    wizard = _wizard(session_id)
    return _panel_action(wizard, wizard.review.set_notes, payload.notes)


@router.post("/sessions/{session_id}/payment/start", response_model=StepViewSchema)
def start_payment(session_id: str) -> StepViewSchema:
    wizard = _wizard(session_id)
    wizard.payment.start()
    return _view(wizard)


@router.post("/sessions/{session_id}/payment/success", response_model=StepViewSchema)
def payment_success(session_id: str, payload: PaymentSuccessSchema) -> StepViewSchema:
    wizard = _wizard(session_id)
    wizard.payment.on_success(payload.reference)
    return _view(wizard)


@router.post("/sessions/{session_id}/payment/close", response_model=StepViewSchema)
def payment_close(session_id: str) -> StepViewSchema:
    wizard = _wizard(session_id)
    wizard.payment.on_close()
    return _view(wizard)


@router.post("/sessions/{session_id}/payment/error", response_model=StepViewSchema)
def payment_error(session_id: str, payload: PaymentErrorSchema) -> StepViewSchema:
    wizard = _wizard(session_id)
    wizard.payment.on_error(payload.message)
    return _view(wizard)


@router.post("/sessions/{session_id}/payment/retry", response_model=StepViewSchema)
def payment_retry(session_id: str) -> StepViewSchema:
    wizard = _wizard(session_id)
    wizard.payment.try_again()
    return _view(wizard)
