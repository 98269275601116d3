from __future__ import annotations

import logging
from typing import Any

from app.application.exceptions import BookingRejectedError
from app.application.ports.booking_endpoint import BookingEndpointPort
from app.application.ports.catalog import CatalogPort
from app.application.utils.references import generate_payment_reference
from app.domain.entities.payment_state import BookingCreated


class MockBookingEndpoint(BookingEndpointPort):
    """Validates and prices the form data against the catalog, like the hosted endpoint."""

    def __init__(self, catalog: CatalogPort) -> None:
        self._catalog = catalog
        self.bookings: dict[str, dict[str, Any]] = {}
        self._logger = logging.getLogger(__name__)

    def create_booking(self, form_data: dict[str, Any], is_guest: bool) -> BookingCreated:
        services = form_data.get("services") or []
        extras = form_data.get("extras") or []
        if not services:
            raise BookingRejectedError("No services selected", status_code=400)
        if not form_data.get("service_date") or not form_data.get("service_time"):
            raise BookingRejectedError("Service date and time required", status_code=400)
        if not form_data.get("address_id") and not form_data.get("new_address"):
            raise BookingRejectedError("Service address required", status_code=400)

        items = {item.id: item for item in self._catalog.list_items([s["service_item_id"] for s in services])}
        extra_prices = {e.id: e for e in self._catalog.list_extras([e["service_extra_id"] for e in extras])}

        total = 0.0
        for line in services:
            item = items.get(line["service_item_id"])
            if item is None:
                raise BookingRejectedError("Invalid service selected", status_code=400)
            total += item.base_price * line["quantity"]
        for line in extras:
            extra = extra_prices.get(line["service_extra_id"])
            if extra is None:
                raise BookingRejectedError("Invalid extra selected", status_code=400)
            total += extra.price * line["quantity"]

        booking_id = f"mock_booking_{len(self.bookings) + 1}"
        reference = generate_payment_reference()
        self.bookings[booking_id] = {
            "status": "pending",
            "form_data": form_data,
            "is_guest": is_guest,
            "total_price": total,
            "payment_reference": reference,
        }
        self._logger.info("Mock booking created", extra={"booking_id": booking_id, "reference": reference})
        return BookingCreated(booking_id=booking_id, payment_reference=reference, total_amount=total)
