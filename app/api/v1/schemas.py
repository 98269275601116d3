from __future__ import annotations

from dataclasses import asdict
from datetime import date
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field

from app.application.dto.panel_result import PanelFailed, PanelResult
from app.application.use_cases.booking_wizard import StepView
from app.application.utils.draft_payload import serialize_draft
from app.domain.entities.booking_draft import NewAddress, WizardStep


class Frequency(str, Enum):
    once = "once"
    weekly = "weekly"
    biweekly = "biweekly"
    monthly = "monthly"


class AddressType(str, Enum):
    home = "home"
    office = "office"
    other = "other"


class OpenSessionRequestSchema(BaseModel):
    session_id: str | None = Field(default=None, pattern=r"^[A-Za-z0-9_-]{1,128}$")
    is_guest: bool = True
    user_id: str | None = None
    email: str | None = None


class ServiceLineSchema(BaseModel):
    service_item_id: str
    quantity: int


class ExtraLineSchema(BaseModel):
    service_extra_id: str
    quantity: int


class NewAddressSchema(BaseModel):
    type: AddressType = AddressType.home
    name: str
    address_line_1: str
    address_line_2: str | None = None
    city: str
    state: str
    postal_code: str
    country: str = "NG"

    def to_entity(self) -> NewAddress:
        return NewAddress(
            type=self.type.value,
            name=self.name,
            address_line_1=self.address_line_1,
            address_line_2=self.address_line_2,
            city=self.city,
            state=self.state,
            postal_code=self.postal_code,
            country=self.country,
        )


class DraftUpdateSchema(BaseModel):
    services: list[ServiceLineSchema] | None = None
    extras: list[ExtraLineSchema] | None = None
    service_date: str | None = None
    service_time: str | None = None
    address_id: str | None = None
    new_address: NewAddressSchema | None = None
    notes: str | None = None
    frequency: Frequency | None = None

    def to_partial(self) -> dict[str, Any]:
        """Only the fields the client actually sent; explicit nulls are kept."""
        partial = self.model_dump(exclude_unset=True, mode="json")
        if self.new_address is not None:
            partial["new_address"] = self.new_address.to_entity()
        return partial


class GoToStepSchema(BaseModel):
    step: WizardStep


class QuantitySchema(BaseModel):
    quantity: int = Field(ge=0)


class DateSelectionSchema(BaseModel):
    service_date: date


class TimeSelectionSchema(BaseModel):
    service_time: str = Field(pattern=r"^\d{2}:\d{2}$")


class SavedAddressSchema(BaseModel):
    address_id: str


class NewAddressSelectionSchema(BaseModel):
    address: NewAddressSchema
    save: bool = False


class NotesSchema(BaseModel):
    notes: str = ""


class PaymentSuccessSchema(BaseModel):
    reference: str


class PaymentErrorSchema(BaseModel):
    message: str | None = None


class PaymentStateSchema(BaseModel):
    status: str
    booking_id: str | None = None
    payment_reference: str | None = None
    total_amount: float | None = None
    authorization_url: str | None = None
    access_code: str | None = None
    error_message: str | None = None
    error_kind: str | None = None


class StepViewSchema(BaseModel):
    session_id: str
    step: WizardStep
    title: str
    description: str
    can_go_back: bool
    can_go_next: bool
    next_label: str | None = None
    draft: dict[str, Any]
    payment: PaymentStateSchema


class ReferenceDataSchema(BaseModel):
    session_id: str
    step: WizardStep
    status: Literal["loaded", "failed"]
    data: Any = None
    message: str | None = None
    retryable: bool = False


class DraftStatusSchema(BaseModel):
    session_id: str
    has_draft: bool
    age_hours: int


def step_view_schema(session_id: str, view: StepView) -> StepViewSchema:
    payment = view.payment
    return StepViewSchema(
        session_id=session_id,
        step=view.step,
        title=view.title,
        description=view.description,
        can_go_back=view.can_go_back,
        can_go_next=view.can_go_next,
        next_label=view.next_label,
        draft=serialize_draft(view.draft),
        payment=PaymentStateSchema(
            status=payment.status.value,
            booking_id=payment.booking.booking_id if payment.booking else None,
            payment_reference=payment.booking.payment_reference if payment.booking else None,
            total_amount=payment.booking.total_amount if payment.booking else None,
            authorization_url=payment.session.authorization_url if payment.session else None,
            access_code=payment.session.access_code if payment.session else None,
            error_message=payment.error_message,
            error_kind=payment.error_kind,
        ),
    )


def reference_data_schema(session_id: str, step: WizardStep, result: PanelResult) -> ReferenceDataSchema:
    if isinstance(result, PanelFailed):
        return ReferenceDataSchema(
            session_id=session_id,
            step=step,
            status="failed",
            message=result.message,
            retryable=result.retryable,
        )
    return ReferenceDataSchema(session_id=session_id, step=step, status="loaded", data=_plain(result.data))


def _plain(value: Any) -> Any:
    if hasattr(value, "__dataclass_fields__"):
        return _plain(asdict(value))
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    return value
