from __future__ import annotations

import logging
from dataclasses import dataclass

from app.application.dto.panel_result import PanelFailed, PanelLoaded, PanelResult
from app.application.exceptions import CollaboratorUnavailableError, InvalidSelectionError
from app.application.ports.catalog import CatalogPort
from app.application.use_cases.wizard_controller import WizardController
from app.domain.entities.booking_draft import BookingDraft
from app.domain.entities.catalog import CatalogSnapshot, ServiceItem


@dataclass(frozen=True)
class ServiceSelectionData:
    catalog: CatalogSnapshot
    selected_category_id: str | None


class ServiceSelectionPanel:
    """Category -> items -> quantities, plus independently toggled extras."""

    def __init__(self, controller: WizardController, catalog: CatalogPort) -> None:
        self._controller = controller
        self._catalog = catalog
        self._snapshot: CatalogSnapshot | None = None
        self._logger = logging.getLogger(__name__)

    def load_reference_data(self, draft: BookingDraft) -> PanelResult:
        try:
            snapshot = CatalogSnapshot(
                categories=tuple(sorted(self._catalog.list_categories(), key=lambda c: c.sort_order)),
                items=tuple(self._catalog.list_items()),
                extras=tuple(self._catalog.list_extras()),
            )
        except CollaboratorUnavailableError as e:
            self._logger.warning(
                "Error fetching services", extra={"session_id": self._controller.session_id, "reason": str(e)}
            )
            return PanelFailed(message=f"Failed to load services: {e}")

        self._snapshot = snapshot
        default_category = snapshot.categories[0].id if snapshot.categories else None
        return PanelLoaded(ServiceSelectionData(catalog=snapshot, selected_category_id=default_category))

    def items_for_category(self, category_id: str | None) -> list[ServiceItem]:
        snapshot = self._require_snapshot()
        if not category_id:
            return list(snapshot.items)
        return [item for item in snapshot.items if item.category_id == category_id]

    def set_service_quantity(self, service_item_id: str, quantity: int) -> BookingDraft:
        snapshot = self._require_snapshot()
        item = snapshot.find_item(service_item_id)
        if item is None:
            raise InvalidSelectionError(f"Unknown service item: {service_item_id}")
        if quantity > 0:
            quantity = min(max(quantity, item.min_quantity), item.max_quantity)
        self._controller.update_form_data(
            {"services": [{"service_item_id": service_item_id, "quantity": max(quantity, 0)}]}
        )
        return self._controller.draft

    def set_extra_quantity(self, service_extra_id: str, quantity: int) -> BookingDraft:
        snapshot = self._require_snapshot()
        if snapshot.find_extra(service_extra_id) is None:
            raise InvalidSelectionError(f"Unknown service extra: {service_extra_id}")
        self._controller.update_form_data(
            {"extras": [{"service_extra_id": service_extra_id, "quantity": max(quantity, 0)}]}
        )
        return self._controller.draft

    def _require_snapshot(self) -> CatalogSnapshot:
        if self._snapshot is None:
            result = self.load_reference_data(self._controller.draft)
            if isinstance(result, PanelFailed):
                raise CollaboratorUnavailableError(result.message)
        return self._snapshot
