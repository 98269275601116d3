from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Mapping

from app.application.ports.draft_store import DraftStorePort
from app.application.utils.draft_payload import parse_new_address
from app.application.utils.step_rules import is_step_valid
from app.domain.entities.booking_draft import (
    FREQUENCIES,
    STEP_ORDER,
    BookingDraft,
    ExtraLine,
    ServiceLine,
    WizardStep,
)

DraftListener = Callable[[BookingDraft], None]

_FORM_FIELDS = {
    "services",
    "extras",
    "service_date",
    "service_time",
    "address_id",
    "new_address",
    "notes",
    "frequency",
}
_LOCKED_FIELDS = {"is_guest", "current_step"}


class WizardController:
    """
    Owns one booking draft and every transition on it.

    Operations never raise: a transition whose precondition does not hold is
    rejected and reported by returning False. Listeners registered through
    subscribe() receive each new draft after a change.
    """

    def __init__(self, session_id: str, store: DraftStorePort, is_guest: bool = True) -> None:
        self._session_id = session_id
        self._store = store
        self._listeners: list[DraftListener] = []
        self._logger = logging.getLogger(__name__)
        self._draft = self._load_initial(is_guest)
        self.subscribe(self._persist)

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def draft(self) -> BookingDraft:
        return self._draft

    @property
    def current_step(self) -> WizardStep:
        return self._draft.current_step

    def subscribe(self, listener: DraftListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def can_advance(self) -> bool:
        return is_step_valid(self._draft.current_step, self._draft) and self._draft.current_step != STEP_ORDER[-1]

    def update_form_data(self, partial: Mapping[str, Any]) -> bool:
        changes: dict[str, Any] = {}
        for key, value in partial.items():
            if key in _LOCKED_FIELDS:
                continue
            if key not in _FORM_FIELDS:
                self._logger.warning(
                    "Ignoring unknown draft field", extra={"session_id": self._session_id, "reason": key}
                )
                continue
            changes[key] = value

        if "services" in changes:
            changes["services"] = _merge_lines(
                self._draft.services,
                changes["services"],
                id_key="service_item_id",
                factory=ServiceLine,
            )
        if "extras" in changes:
            changes["extras"] = _merge_lines(
                self._draft.extras,
                changes["extras"],
                id_key="service_extra_id",
                factory=ExtraLine,
            )
        if "new_address" in changes:
            try:
                changes["new_address"] = parse_new_address(changes["new_address"])
            except ValueError as e:
                self._logger.warning(
                    "Ignoring malformed new address", extra={"session_id": self._session_id, "reason": str(e)}
                )
                del changes["new_address"]
        if "frequency" in changes and changes["frequency"] not in FREQUENCIES:
            self._logger.warning(
                "Ignoring unknown frequency",
                extra={"session_id": self._session_id, "reason": changes["frequency"]},
            )
            del changes["frequency"]
        for text_key in ("service_date", "service_time", "notes"):
            if text_key in changes:
                changes[text_key] = changes[text_key] or ""

        # Saved address and inline address are mutually exclusive.
        if changes.get("address_id"):
            changes["new_address"] = None
        elif changes.get("new_address") is not None:
            changes["address_id"] = None
        elif "address_id" in changes:
            changes["address_id"] = None

        updated = replace(self._draft, **changes)
        if updated == self._draft:
            return False
        self._set(updated)
        return True

    def next_step(self) -> bool:
        if not self.can_advance():
            return False
        target = STEP_ORDER[self._draft.current_step.position + 1]
        self._set(replace(self._draft, current_step=target))
        return True

    def prev_step(self) -> bool:
        position = self._draft.current_step.position
        if position == 0:
            return False
        self._set(replace(self._draft, current_step=STEP_ORDER[position - 1]))
        return True

    def go_to_step(self, target: WizardStep) -> bool:
        if target.position > self._draft.current_step.position:
            return False
        if target == self._draft.current_step:
            return False
        self._set(replace(self._draft, current_step=target))
        return True

    def clear_draft(self) -> None:
        self._draft = BookingDraft.empty(is_guest=self._draft.is_guest)
        try:
            self._store.clear(self._session_id)
        except OSError as e:
            self._logger.error(
                "Failed to clear booking draft", extra={"session_id": self._session_id, "reason": str(e)}
            )
        self._logger.info("Booking draft cleared", extra={"session_id": self._session_id})
        self._notify(persist=False)

    def _load_initial(self, is_guest: bool) -> BookingDraft:
        stored = self._store.load(self._session_id)
        if stored is None:
            return BookingDraft.empty(is_guest=is_guest)
        self._logger.info(
            "Booking draft restored",
            extra={"session_id": self._session_id, "step": stored.current_step.value},
        )
        return stored

    def _set(self, draft: BookingDraft) -> None:
        self._draft = draft
        self._notify(persist=True)

    def _notify(self, persist: bool) -> None:
        for listener in list(self._listeners):
            if listener == self._persist and not persist:
                continue
            listener(self._draft)

    def _persist(self, draft: BookingDraft) -> None:
        try:
            self._store.save(self._session_id, draft)
        except OSError as e:
            self._logger.error(
                "Failed to save booking draft", extra={"session_id": self._session_id, "reason": str(e)}
            )


def _merge_lines(current: tuple, incoming: Any, id_key: str, factory: Callable[[str, int], Any]) -> tuple:
    """
    Merge incoming {id, quantity} entries into current lines by id.
    Quantity <= 0 removes the line; otherwise it replaces or appends.
    """
    merged: dict[str, Any] = {getattr(line, id_key): line for line in current}
    for entry in incoming or []:
        if isinstance(entry, Mapping):
            line_id, quantity = entry.get(id_key), entry.get("quantity", 0)
        else:
            line_id, quantity = getattr(entry, id_key, None), getattr(entry, "quantity", 0)
        if not line_id:
            continue
        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            continue
        if quantity <= 0:
            merged.pop(str(line_id), None)
        else:
            merged[str(line_id)] = factory(str(line_id), quantity)
    return tuple(merged.values())
