from __future__ import annotations

import logging
from typing import Any

import httpx

from app.application.exceptions import BookingRejectedError, CollaboratorUnavailableError
from app.application.ports.booking_endpoint import BookingEndpointPort
from app.domain.entities.payment_state import BookingCreated

TRANSIENT_STATUS_CODES = {408, 429}


class HttpBookingEndpoint(BookingEndpointPort):
    def __init__(self, base_url: str, access_token: str | None = None, timeout: float = 10.0) -> None:
        self._url = base_url.rstrip("/") + "/api/bookings/create"
        self._access_token = access_token
        self._client = httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def create_booking(self, form_data: dict[str, Any], is_guest: bool) -> BookingCreated:
        headers = {"Content-Type": "application/json"}
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"

        try:
            resp = self._client.post(self._url, json={"formData": form_data, "isGuest": is_guest}, headers=headers)
        except httpx.TransportError as e:
            raise CollaboratorUnavailableError(f"Booking endpoint unreachable: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = {}

        if resp.status_code >= 500 or resp.status_code in TRANSIENT_STATUS_CODES:
            raise CollaboratorUnavailableError(f"Booking endpoint error {resp.status_code}")
        if resp.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            self._logger.warning(
                "Booking rejected", extra={"status": resp.status_code, "reason": message or resp.text[:200]}
            )
            raise BookingRejectedError(message or "Failed to create booking", status_code=resp.status_code)

        booking = body.get("booking") if isinstance(body, dict) else None
        if not isinstance(booking, dict) or not booking.get("id") or not booking.get("payment_reference"):
            raise CollaboratorUnavailableError("Booking endpoint returned an incomplete booking")

        return BookingCreated(
            booking_id=str(booking["id"]),
            payment_reference=str(booking["payment_reference"]),
            total_amount=float(booking.get("total_amount") or 0),
        )
