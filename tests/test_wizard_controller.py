"""
Tests for wizard step transitions and draft merging.
"""

from __future__ import annotations

import tempfile

from app.application.use_cases.wizard_controller import WizardController
from app.application.utils.step_rules import is_step_valid
from app.domain.entities.booking_draft import BookingDraft, NewAddress, ServiceLine, WizardStep
from app.infrastructure.store.json_draft_store import JsonDraftStore
from app.infrastructure.store.memory_draft_store import MemoryDraftStore


def _controller(store=None, session_id: str = "s1", is_guest: bool = True) -> WizardController:
    return WizardController(session_id=session_id, store=store or MemoryDraftStore(), is_guest=is_guest)


def _address() -> NewAddress:
    return NewAddress(name="Home", address_line_1="1 Broad St", city="Lagos", state="Lagos", postal_code="100001")


def _advance_to_address(controller: WizardController) -> None:
    controller.update_form_data({"services": [{"service_item_id": "svc1", "quantity": 1}]})
    assert controller.next_step()
    controller.update_form_data({"service_date": "2026-10-22", "service_time": "09:00"})
    assert controller.next_step()
    assert controller.current_step == WizardStep.address


def test_step_rules_services_and_schedule():
    empty = BookingDraft()
    assert is_step_valid(WizardStep.services, empty) is False
    assert is_step_valid(WizardStep.services, BookingDraft(services=(ServiceLine("a", 1),))) is True

    assert is_step_valid(WizardStep.schedule, BookingDraft(service_date="2026-10-22")) is False
    assert is_step_valid(WizardStep.schedule, BookingDraft(service_time="09:00")) is False
    assert is_step_valid(WizardStep.schedule, BookingDraft(service_date="2026-10-22", service_time="09:00")) is True


def test_step_rules_address_review_payment():
    assert is_step_valid(WizardStep.address, BookingDraft()) is False
    assert is_step_valid(WizardStep.address, BookingDraft(address_id="addr1")) is True
    assert is_step_valid(WizardStep.address, BookingDraft(new_address=_address())) is True
    assert is_step_valid(WizardStep.review, BookingDraft()) is True
    assert is_step_valid(WizardStep.payment, BookingDraft()) is True


def test_next_step_is_noop_on_empty_services():
    """Empty draft -> next from Services stays on Services."""
    controller = _controller()
    before = controller.draft

    assert controller.next_step() is False
    assert controller.current_step == WizardStep.services
    assert controller.draft == before


def test_zero_quantity_removes_service():
    controller = _controller()
    controller.update_form_data({"services": [{"service_item_id": "svc1", "quantity": 2}]})

    controller.update_form_data({"services": [{"service_item_id": "svc1", "quantity": 0}]})

    assert controller.draft.services == ()


def test_positive_quantity_replaces_existing_entry():
    controller = _controller()
    controller.update_form_data({"services": [{"service_item_id": "svc1", "quantity": 2}]})
    controller.update_form_data({"services": [{"service_item_id": "svc2", "quantity": 1}]})

    controller.update_form_data({"services": [{"service_item_id": "svc1", "quantity": 5}]})

    assert controller.draft.services == (ServiceLine("svc1", 5), ServiceLine("svc2", 1))


def test_extras_merge_by_id():
    controller = _controller()
    controller.update_form_data(
        {
            "extras": [
                {"service_extra_id": "ext1", "quantity": 1},
                {"service_extra_id": "ext1", "quantity": 3},
                {"service_extra_id": "ext2", "quantity": 1},
            ]
        }
    )
    assert [(e.service_extra_id, e.quantity) for e in controller.draft.extras] == [("ext1", 3), ("ext2", 1)]

    controller.update_form_data({"extras": [{"service_extra_id": "ext2", "quantity": -1}]})
    assert [(e.service_extra_id, e.quantity) for e in controller.draft.extras] == [("ext1", 3)]


def test_address_step_requires_an_address_source():
    """Address step with nothing set cannot advance; after address_id it reaches Review."""
    controller = _controller()
    _advance_to_address(controller)

    assert controller.next_step() is False
    assert controller.current_step == WizardStep.address

    controller.update_form_data({"address_id": "addr1"})
    assert controller.next_step() is True
    assert controller.current_step == WizardStep.review


def test_address_sources_are_exclusive():
    controller = _controller()
    controller.update_form_data({"new_address": _address()})
    assert controller.draft.new_address == _address()

    controller.update_form_data({"address_id": "addr1"})
    assert controller.draft.address_id == "addr1"
    assert controller.draft.new_address is None

    controller.update_form_data({"new_address": _address()})
    assert controller.draft.address_id is None
    assert controller.draft.new_address is not None


def test_go_to_step_backward_allowed_forward_rejected():
    controller = _controller()
    _advance_to_address(controller)
    controller.update_form_data({"address_id": "addr1"})
    controller.next_step()
    assert controller.current_step == WizardStep.review

    assert controller.go_to_step(WizardStep.payment) is False
    assert controller.current_step == WizardStep.review

    assert controller.go_to_step(WizardStep.schedule) is True
    assert controller.current_step == WizardStep.schedule


def test_go_to_step_ahead_from_start_is_noop():
    controller = _controller()
    controller.update_form_data({"services": [{"service_item_id": "svc1", "quantity": 1}]})

    assert controller.go_to_step(WizardStep.address) is False
    assert controller.current_step == WizardStep.services


def test_prev_step_noop_at_first_step():
    controller = _controller()
    assert controller.prev_step() is False
    assert controller.current_step == WizardStep.services


def test_next_step_noop_at_payment():
    controller = _controller()
    _advance_to_address(controller)
    controller.update_form_data({"address_id": "addr1"})
    controller.next_step()
    controller.next_step()
    assert controller.current_step == WizardStep.payment

    assert controller.next_step() is False
    assert controller.current_step == WizardStep.payment
    assert controller.prev_step() is True
    assert controller.current_step == WizardStep.review


def test_is_guest_and_step_cannot_be_patched():
    controller = _controller(is_guest=True)
    controller.update_form_data({"is_guest": False, "current_step": "payment", "notes": "hi"})

    assert controller.draft.is_guest is True
    assert controller.current_step == WizardStep.services
    assert controller.draft.notes == "hi"


def test_unknown_fields_and_frequency_ignored():
    controller = _controller()
    assert controller.update_form_data({"colour": "blue"}) is False
    assert controller.update_form_data({"frequency": "daily"}) is False
    assert controller.update_form_data({"frequency": "monthly"}) is True
    assert controller.draft.frequency == "monthly"


def test_mutations_are_persisted_and_rehydrated():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonDraftStore(data_dir=tmpdir)
        controller = _controller(store=store, session_id="persisted")
        _advance_to_address(controller)

        restored = _controller(store=store, session_id="persisted")

        assert restored.draft == controller.draft
        assert restored.current_step == WizardStep.address


def test_clear_draft_then_load_gives_empty_draft():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonDraftStore(data_dir=tmpdir)
        controller = _controller(store=store, session_id="cleared", is_guest=False)
        _advance_to_address(controller)

        controller.clear_draft()

        assert controller.draft == BookingDraft.empty(is_guest=False)
        assert store.load("cleared") is None
        fresh = _controller(store=store, session_id="cleared")
        assert fresh.draft == BookingDraft.empty()
        assert fresh.current_step == WizardStep.services


def test_subscribers_receive_each_change():
    controller = _controller()
    seen: list[BookingDraft] = []
    unsubscribe = controller.subscribe(seen.append)

    controller.update_form_data({"notes": "first"})
    controller.next_step()  # rejected, no notification
    unsubscribe()
    controller.update_form_data({"notes": "second"})

    assert [draft.notes for draft in seen] == ["first"]


class _FailingStore(MemoryDraftStore):
    def save(self, session_id, draft):
        raise OSError("disk full")


def test_storage_failure_does_not_break_flow():
    controller = _controller(store=_FailingStore())

    assert controller.update_form_data({"services": [{"service_item_id": "svc1", "quantity": 1}]}) is True
    assert controller.next_step() is True
    assert controller.current_step == WizardStep.schedule
