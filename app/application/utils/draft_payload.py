from __future__ import annotations

from dataclasses import asdict
from typing import Any

from app.domain.entities.booking_draft import (
    ADDRESS_TYPES,
    FREQUENCIES,
    BookingDraft,
    ExtraLine,
    NewAddress,
    ServiceLine,
    WizardStep,
)


def draft_to_form_data(draft: BookingDraft) -> dict[str, Any]:
    """Form data in the shape the booking-creation endpoint accepts."""
    form: dict[str, Any] = {
        "services": [
            {"service_item_id": line.service_item_id, "quantity": line.quantity} for line in draft.services
        ],
        "extras": [
            {"service_extra_id": line.service_extra_id, "quantity": line.quantity} for line in draft.extras
        ],
        "service_date": draft.service_date,
        "service_time": draft.service_time,
        "notes": draft.notes,
        "frequency": draft.frequency,
    }
    if draft.address_id is not None:
        form["address_id"] = draft.address_id
    if draft.new_address is not None:
        form["new_address"] = asdict(draft.new_address)
    return form


def serialize_draft(draft: BookingDraft) -> dict[str, Any]:
    data = draft_to_form_data(draft)
    data["address_id"] = draft.address_id
    data["new_address"] = asdict(draft.new_address) if draft.new_address is not None else None
    data["current_step"] = draft.current_step.value
    data["is_guest"] = draft.is_guest
    return data


def deserialize_draft(data: Any) -> BookingDraft:
    """Rebuild a draft from stored data. Raises ValueError when the shape is wrong."""
    if not isinstance(data, dict):
        raise ValueError("draft payload must be an object")
    services = data.get("services")
    extras = data.get("extras", [])
    if not isinstance(services, list) or not isinstance(extras, list):
        raise ValueError("services and extras must be lists")

    try:
        service_lines = _dedupe_lines(
            [ServiceLine(str(entry["service_item_id"]), int(entry["quantity"])) for entry in services],
            key="service_item_id",
        )
        extra_lines = _dedupe_lines(
            [ExtraLine(str(entry["service_extra_id"]), int(entry["quantity"])) for entry in extras],
            key="service_extra_id",
        )
        step = WizardStep(data.get("current_step", WizardStep.services.value))
    except (KeyError, TypeError) as exc:
        raise ValueError(f"malformed draft line: {exc}") from exc

    frequency = data.get("frequency") or "once"
    if frequency not in FREQUENCIES:
        raise ValueError(f"unknown frequency: {frequency}")

    return BookingDraft(
        services=service_lines,
        extras=extra_lines,
        service_date=str(data.get("service_date") or ""),
        service_time=str(data.get("service_time") or ""),
        address_id=data.get("address_id") or None,
        new_address=parse_new_address(data.get("new_address")),
        notes=str(data.get("notes") or ""),
        frequency=frequency,
        current_step=step,
        is_guest=bool(data.get("is_guest", True)),
    )


def parse_new_address(data: Any) -> NewAddress | None:
    if data is None:
        return None
    if isinstance(data, NewAddress):
        return data
    if not isinstance(data, dict):
        raise ValueError("new_address must be an object")
    address_type = data.get("type") or "home"
    if address_type not in ADDRESS_TYPES:
        raise ValueError(f"unknown address type: {address_type}")
    return NewAddress(
        type=address_type,
        name=str(data.get("name") or ""),
        address_line_1=str(data.get("address_line_1") or ""),
        address_line_2=data.get("address_line_2") or None,
        city=str(data.get("city") or ""),
        state=str(data.get("state") or ""),
        postal_code=str(data.get("postal_code") or ""),
        country=str(data.get("country") or "NG"),
    )


def _dedupe_lines(lines: list, key: str) -> tuple:
    merged: dict[str, Any] = {}
    for line in lines:
        if line.quantity < 1:
            raise ValueError(f"quantity must be at least 1 for {getattr(line, key)}")
        merged[getattr(line, key)] = line
    return tuple(merged.values())
