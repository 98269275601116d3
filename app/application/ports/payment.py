from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from app.domain.entities.payment_state import PaymentSession


@dataclass(frozen=True)
class PaymentRequest:
    amount_minor_units: int
    payer_email: str
    reference: str
    metadata: dict[str, Any] = field(default_factory=dict)


class PaymentPort(ABC):
    @abstractmethod
    def initialize(self, request: PaymentRequest) -> PaymentSession:
        """Open a payment for the reference. Raises PaymentInitiationError on failure."""
        raise NotImplementedError
