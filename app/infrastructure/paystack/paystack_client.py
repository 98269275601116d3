from __future__ import annotations

import logging

import httpx

from app.application.exceptions import PaymentInitiationError
from app.application.ports.payment import PaymentPort, PaymentRequest
from app.domain.entities.payment_state import PaymentSession


class PaystackPayments(PaymentPort):
    def __init__(
        self,
        secret_key: str,
        base_url: str = "https://api.paystack.co",
        currency: str = "NGN",
        callback_url: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        if not secret_key:
            raise ValueError("PAYSTACK_SECRET_KEY is required for Paystack payments")
        self._secret_key = secret_key
        self._base_url = base_url.rstrip("/")
        self._currency = currency
        self._callback_url = callback_url
        self._client = httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def initialize(self, request: PaymentRequest) -> PaymentSession:
        payload = {
            "email": request.payer_email,
            "amount": request.amount_minor_units,
            "reference": request.reference,
            "currency": self._currency,
            "metadata": {
                **request.metadata,
                "custom_fields": [
                    {
                        "display_name": "Booking Reference",
                        "variable_name": "booking_reference",
                        "value": request.reference,
                    }
                ],
            },
        }
        if self._callback_url:
            payload["callback_url"] = self._callback_url
        headers = {"Authorization": f"Bearer {self._secret_key}", "Content-Type": "application/json"}

        try:
            resp = self._client.post(f"{self._base_url}/transaction/initialize", json=payload, headers=headers)
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error(
                "Paystack initialize failed", extra={"reference": request.reference, "reason": str(e)}
            )
            raise PaymentInitiationError("Payment processing failed. Please try again.") from e

        data = body.get("data") or {}
        if not body.get("status") or not data.get("authorization_url"):
            self._logger.error(
                "Paystack initialize rejected",
                extra={"reference": request.reference, "reason": body.get("message")},
            )
            raise PaymentInitiationError(body.get("message") or "Payment processing failed. Please try again.")

        return PaymentSession(
            reference=data.get("reference") or request.reference,
            authorization_url=data["authorization_url"],
            access_code=data.get("access_code"),
        )
