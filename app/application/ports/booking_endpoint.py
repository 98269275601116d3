from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from app.domain.entities.payment_state import BookingCreated


class BookingEndpointPort(ABC):
    @abstractmethod
    def create_booking(self, form_data: dict[str, Any], is_guest: bool) -> BookingCreated:
        """
        Persist a booking from serialized draft form data.
        Raises BookingRejectedError on validation failure and
        CollaboratorUnavailableError on transient failure.
        """
        raise NotImplementedError
