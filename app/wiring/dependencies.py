from functools import lru_cache
import logging
import threading
import time
import uuid
from collections import OrderedDict
from datetime import date, datetime
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.application.ports.addresses import AddressPort
from app.application.ports.availability import AvailabilityPort
from app.application.ports.booking_endpoint import BookingEndpointPort
from app.application.ports.catalog import CatalogPort
from app.application.ports.draft_store import DraftStorePort
from app.application.ports.payment import PaymentPort
from app.application.use_cases.address import AddressPanel
from app.application.use_cases.booking_wizard import BookingWizard, CustomerContext
from app.application.use_cases.payment_flow import PaymentFlow
from app.application.use_cases.review import ReviewPanel
from app.application.use_cases.schedule import SchedulePanel
from app.application.use_cases.service_selection import ServiceSelectionPanel
from app.application.use_cases.submission import BookingSubmissionAdapter
from app.application.use_cases.wizard_controller import WizardController
from app.infrastructure.addresses.mock_addresses import MockAddressBook
from app.infrastructure.addresses.supabase_addresses import SupabaseAddressBook
from app.infrastructure.availability.rules_availability import RulesAvailability
from app.infrastructure.bookings.http_booking_endpoint import HttpBookingEndpoint
from app.infrastructure.bookings.mock_booking_endpoint import MockBookingEndpoint
from app.infrastructure.catalog.mock_catalog import MockCatalog
from app.infrastructure.catalog.supabase_catalog import SupabaseCatalog
from app.infrastructure.paystack.mock_payments import MockPayments
from app.infrastructure.paystack.paystack_client import PaystackPayments
from app.infrastructure.store.json_draft_store import JsonDraftStore
from app.infrastructure.store.memory_draft_store import MemoryDraftStore
from app.infrastructure.supabase.rest_client import SupabaseRestClient


logger = logging.getLogger(__name__)

_draft_store: DraftStorePort | None = None
_wizards: OrderedDict[str, tuple[BookingWizard, float]] = OrderedDict()
_wizards_lock = threading.Lock()


def _is_dev() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


def get_draft_store() -> DraftStorePort:
    global _draft_store
    if _draft_store is None:
        if settings.DRAFT_STORE_DIR:
            _draft_store = JsonDraftStore(data_dir=settings.DRAFT_STORE_DIR)
        else:
            _draft_store = MemoryDraftStore()
    return _draft_store


@lru_cache
def get_supabase_client() -> SupabaseRestClient | None:
    if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
        return None
    return SupabaseRestClient(
        base_url=settings.SUPABASE_URL,
        api_key=settings.SUPABASE_ANON_KEY,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )


@lru_cache
def get_catalog() -> CatalogPort:
    client = get_supabase_client()
    if client is None:
        if not _is_dev():
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY are required outside dev.")
        logger.info("Using MockCatalog (Supabase not configured, ENV=dev/local)")
        return MockCatalog()
    return SupabaseCatalog(client)


@lru_cache
def get_address_book() -> AddressPort:
    client = get_supabase_client()
    if client is None:
        return MockAddressBook()
    return SupabaseAddressBook(client)


@lru_cache
def get_availability() -> AvailabilityPort:
    return RulesAvailability()


@lru_cache
def get_booking_endpoint() -> BookingEndpointPort:
    if not settings.BOOKING_API_URL:
        if not _is_dev():
            raise ValueError("BOOKING_API_URL is required outside dev.")
        logger.info("Using MockBookingEndpoint (BOOKING_API_URL missing, ENV=dev/local)")
        return MockBookingEndpoint(catalog=get_catalog())
    return HttpBookingEndpoint(
        base_url=settings.BOOKING_API_URL,
        access_token=settings.BOOKING_API_TOKEN,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )


@lru_cache
def get_payments() -> PaymentPort:
    if not settings.PAYSTACK_SECRET_KEY:
        if not _is_dev():
            raise ValueError("PAYSTACK_SECRET_KEY is required to take payments.")
        logger.info("Using MockPayments (token missing, ENV=dev/local)")
        return MockPayments()
    return PaystackPayments(
        secret_key=settings.PAYSTACK_SECRET_KEY,
        base_url=settings.PAYSTACK_BASE_URL,
        currency=settings.PAYMENT_CURRENCY,
        callback_url=settings.PAYSTACK_CALLBACK_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )


def business_today() -> date:
    return datetime.now(ZoneInfo(settings.BUSINESS_TIMEZONE)).date()


def build_wizard(session_id: str, customer: CustomerContext) -> BookingWizard:
    controller = WizardController(session_id=session_id, store=get_draft_store(), is_guest=customer.is_guest)
    submission = BookingSubmissionAdapter(
        endpoint=get_booking_endpoint(),
        payments=get_payments(),
        max_attempts=settings.SUBMISSION_MAX_ATTEMPTS,
        backoff_seconds=settings.SUBMISSION_BACKOFF_SECONDS,
    )
    return BookingWizard(
        controller=controller,
        services=ServiceSelectionPanel(controller, get_catalog()),
        schedule=SchedulePanel(
            controller,
            get_availability(),
            today=business_today,
            window_days=settings.BOOKING_WINDOW_DAYS,
        ),
        address=AddressPanel(controller, get_address_book(), customer.user_id),
        review=ReviewPanel(
            controller,
            get_catalog(),
            get_address_book(),
            customer.user_id,
            currency=settings.PAYMENT_CURRENCY,
        ),
        payment=PaymentFlow(controller, submission, customer.email),
        customer=customer,
    )


def _evict_stale(now: float) -> None:
    """Drop wizards idle past WIZARD_IDLE_SECONDS, then the least recently used beyond WIZARD_REGISTRY_SIZE."""
    for session_id, (_, last_used) in list(_wizards.items()):
        if now - last_used > settings.WIZARD_IDLE_SECONDS:
            del _wizards[session_id]
            logger.info("Booking session evicted", extra={"session_id": session_id, "reason": "idle"})
    while len(_wizards) > settings.WIZARD_REGISTRY_SIZE:
        session_id, _ = _wizards.popitem(last=False)
        logger.info("Booking session evicted", extra={"session_id": session_id, "reason": "capacity"})


def open_wizard(session_id: str | None, customer: CustomerContext) -> BookingWizard:
    """Return the live wizard for session_id, or build one (rehydrating any stored draft)."""
    with _wizards_lock:
        now = time.monotonic()
        if session_id and session_id in _wizards:
            wizard, _ = _wizards[session_id]
            _wizards[session_id] = (wizard, now)
            _wizards.move_to_end(session_id)
            return wizard
        session_id = session_id or uuid.uuid4().hex
        wizard = build_wizard(session_id, customer)
        _wizards[session_id] = (wizard, now)
        _evict_stale(now)
        logger.info(
            "Booking session opened",
            extra={"session_id": session_id, "step": wizard.controller.current_step.value},
        )
        return wizard


def get_wizard(session_id: str) -> BookingWizard | None:
    """Live wizard for session_id; None once evicted (reopen the session to rehydrate from the store)."""
    with _wizards_lock:
        now = time.monotonic()
        _evict_stale(now)
        entry = _wizards.get(session_id)
        if entry is None:
            return None
        _wizards[session_id] = (entry[0], now)
        _wizards.move_to_end(session_id)
        return entry[0]


def reset_wizards() -> None:
    with _wizards_lock:
        _wizards.clear()
