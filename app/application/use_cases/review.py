from __future__ import annotations

import logging
from dataclasses import dataclass

from app.application.dto.panel_result import PanelFailed, PanelLoaded, PanelResult
from app.application.exceptions import CollaboratorUnavailableError
from app.application.ports.addresses import AddressPort
from app.application.ports.catalog import CatalogPort
from app.application.use_cases.wizard_controller import WizardController
from app.application.utils.pricing import PriceBreakdown, format_currency, price_draft
from app.domain.entities.booking_draft import BookingDraft


@dataclass(frozen=True)
class ReviewSummary:
    pricing: PriceBreakdown
    total_text: str
    service_date: str
    service_time: str
    address_text: str | None
    notes: str
    frequency: str


class ReviewPanel:
    def __init__(
        self,
        controller: WizardController,
        catalog: CatalogPort,
        addresses: AddressPort,
        user_id: str | None,
        currency: str = "NGN",
    ) -> None:
        self._controller = controller
        self._catalog = catalog
        self._addresses = addresses
        self._user_id = user_id
        self._currency = currency
        self._logger = logging.getLogger(__name__)

    def load_reference_data(self, draft: BookingDraft) -> PanelResult:
        try:
            pricing = self.price(draft)
            address_text = self._address_text(draft)
        except CollaboratorUnavailableError as e:
            self._logger.warning(
                "Error fetching booking details",
                extra={"session_id": self._controller.session_id, "reason": str(e)},
            )
            return PanelFailed(message="Could not load booking details. Please try again.")

        if pricing.missing_ids:
            self._logger.warning(
                "Draft references items missing from catalog",
                extra={"session_id": self._controller.session_id, "reason": ",".join(pricing.missing_ids)},
            )
        return PanelLoaded(
            ReviewSummary(
                pricing=pricing,
                total_text=format_currency(pricing.total, self._currency),
                service_date=draft.service_date,
                service_time=draft.service_time,
                address_text=address_text,
                notes=draft.notes,
                frequency=draft.frequency,
            )
        )

    def price(self, draft: BookingDraft) -> PriceBreakdown:
        item_ids = [line.service_item_id for line in draft.services]
        extra_ids = [line.service_extra_id for line in draft.extras]
        items = self._catalog.list_items(item_ids) if item_ids else []
        extras = self._catalog.list_extras(extra_ids) if extra_ids else []
        return price_draft(draft, items, extras)

    def set_notes(self, notes: str) -> BookingDraft:
        self._controller.update_form_data({"notes": notes})
        return self._controller.draft

    def _address_text(self, draft: BookingDraft) -> str | None:
        if draft.new_address is not None:
            a = draft.new_address
            return f"{a.address_line_1}, {a.city}, {a.state} {a.postal_code}"
        if draft.address_id and self._user_id:
            for address in self._addresses.list_addresses(self._user_id):
                if address.id == draft.address_id:
                    return address.one_line()
        return None
