from __future__ import annotations

import logging

from app.application.ports.payment import PaymentPort, PaymentRequest
from app.domain.entities.payment_state import PaymentSession


class MockPayments(PaymentPort):
    def __init__(self) -> None:
        self.requests: list[PaymentRequest] = []
        self._logger = logging.getLogger(__name__)

    def initialize(self, request: PaymentRequest) -> PaymentSession:
        self.requests.append(request)
        self._logger.info(
            "Mock payment initialized",
            extra={"reference": request.reference, "status": f"amount={request.amount_minor_units}"},
        )
        return PaymentSession(
            reference=request.reference,
            authorization_url=f"https://checkout.example.test/{request.reference}",
            access_code=f"mock_access_{len(self.requests)}",
        )
