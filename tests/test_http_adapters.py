"""
Tests for the httpx-backed booking endpoint, Paystack and Supabase adapters.
"""

from __future__ import annotations

import json

import httpx
import pytest

from app.application.dto.panel_result import PanelFailed
from app.application.exceptions import (
    BookingRejectedError,
    CollaboratorUnavailableError,
    PaymentInitiationError,
)
from app.application.ports.payment import PaymentRequest
from app.application.use_cases.service_selection import ServiceSelectionPanel
from app.application.use_cases.wizard_controller import WizardController
from app.infrastructure.bookings.http_booking_endpoint import HttpBookingEndpoint
from app.infrastructure.catalog.supabase_catalog import SupabaseCatalog
from app.infrastructure.paystack.paystack_client import PaystackPayments
from app.infrastructure.store.memory_draft_store import MemoryDraftStore
from app.infrastructure.supabase.rest_client import SupabaseRestClient


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _endpoint(handler) -> HttpBookingEndpoint:
    endpoint = HttpBookingEndpoint(base_url="https://book.example.test", access_token="tok")
    endpoint._client = _client(handler)
    return endpoint


def test_booking_endpoint_success():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"success": True, "booking": {"id": "b1", "total_amount": 12500, "payment_reference": "BOOK_1"}},
        )

    created = _endpoint(handler).create_booking({"services": []}, is_guest=True)

    assert seen["url"] == "https://book.example.test/api/bookings/create"
    assert seen["auth"] == "Bearer tok"
    assert seen["body"] == {"formData": {"services": []}, "isGuest": True}
    assert (created.booking_id, created.payment_reference, created.total_amount) == ("b1", "BOOK_1", 12500.0)


def test_booking_endpoint_validation_error_is_rejection():
    endpoint = _endpoint(lambda request: httpx.Response(400, json={"message": "No services selected"}))

    with pytest.raises(BookingRejectedError) as excinfo:
        endpoint.create_booking({}, is_guest=True)
    assert excinfo.value.message == "No services selected"
    assert excinfo.value.status_code == 400


def test_booking_endpoint_server_error_is_unavailable():
    endpoint = _endpoint(lambda request: httpx.Response(503, text="busy"))

    with pytest.raises(CollaboratorUnavailableError):
        endpoint.create_booking({}, is_guest=True)


def test_booking_endpoint_timeout_and_rate_limit_are_unavailable():
    for status in (408, 429):
        endpoint = _endpoint(lambda request, status=status: httpx.Response(status, json={"message": "slow down"}))

        with pytest.raises(CollaboratorUnavailableError):
            endpoint.create_booking({}, is_guest=True)


def test_booking_endpoint_transport_error_is_unavailable():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(CollaboratorUnavailableError):
        _endpoint(handler).create_booking({}, is_guest=False)


def _request() -> PaymentRequest:
    return PaymentRequest(
        amount_minor_units=1250000,
        payer_email="guest@example.com",
        reference="BOOK_1",
        metadata={"booking_id": "b1"},
    )


def test_paystack_initialize_builds_transaction():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "status": True,
                "data": {"authorization_url": "https://checkout.paystack.com/x", "access_code": "x", "reference": "BOOK_1"},
            },
        )

    payments = PaystackPayments(secret_key="sk_test", callback_url="https://app.example.test/done")
    payments._client = _client(handler)

    session = payments.initialize(_request())

    assert seen["url"] == "https://api.paystack.co/transaction/initialize"
    assert seen["body"]["amount"] == 1250000
    assert seen["body"]["currency"] == "NGN"
    assert seen["body"]["callback_url"] == "https://app.example.test/done"
    assert seen["body"]["metadata"]["booking_id"] == "b1"
    assert seen["body"]["metadata"]["custom_fields"][0]["value"] == "BOOK_1"
    assert session.authorization_url == "https://checkout.paystack.com/x"


def test_paystack_failure_raises_initiation_error():
    payments = PaystackPayments(secret_key="sk_test")
    payments._client = _client(lambda request: httpx.Response(200, json={"status": False, "message": "Invalid key"}))

    with pytest.raises(PaymentInitiationError) as excinfo:
        payments.initialize(_request())
    assert str(excinfo.value) == "Invalid key"


def test_paystack_requires_secret_key():
    with pytest.raises(ValueError):
        PaystackPayments(secret_key="")


def _supabase(handler) -> SupabaseRestClient:
    client = SupabaseRestClient(base_url="https://db.example.test", api_key="anon")
    client._client = _client(handler)
    return client


def test_supabase_non_json_body_is_unavailable():
    client = _supabase(lambda request: httpx.Response(200, text="<html>maintenance</html>"))

    with pytest.raises(CollaboratorUnavailableError):
        client.select("service_categories")
    with pytest.raises(CollaboratorUnavailableError):
        client.insert("addresses", {"name": "Home"})


def test_supabase_catalog_skips_malformed_categories():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=[
                {"id": "cat_home", "name": "Home", "sort_order": 1},
                {"id": "cat_bad", "name": "Bad", "sort_order": "first"},
                "not-a-row",
            ],
        )

    categories = SupabaseCatalog(_supabase(handler)).list_categories()

    assert [category.id for category in categories] == ["cat_home"]


def test_service_panel_reports_failure_for_garbled_catalog_response():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/service_categories"):
            return httpx.Response(200, text="not json")
        return httpx.Response(200, json=[])

    controller = WizardController(session_id="supabase", store=MemoryDraftStore())
    panel = ServiceSelectionPanel(controller, SupabaseCatalog(_supabase(handler)))

    result = panel.load_reference_data(controller.draft)

    assert isinstance(result, PanelFailed)
    assert "Failed to fetch service_categories" in result.message
