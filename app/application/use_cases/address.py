from __future__ import annotations

import logging

from app.application.dto.panel_result import PanelFailed, PanelLoaded, PanelResult
from app.application.exceptions import CollaboratorUnavailableError, InvalidSelectionError
from app.application.ports.addresses import AddressPort
from app.application.use_cases.wizard_controller import WizardController
from app.domain.entities.address import Address
from app.domain.entities.booking_draft import BookingDraft, NewAddress


class AddressPanel:
    """Saved address or inline new address; exactly one ends up on the draft."""

    def __init__(self, controller: WizardController, addresses: AddressPort, user_id: str | None) -> None:
        self._controller = controller
        self._addresses = addresses
        self._user_id = user_id
        self._saved: list[Address] | None = None
        self._logger = logging.getLogger(__name__)

    def load_reference_data(self, draft: BookingDraft) -> PanelResult:
        if not self._user_id:
            self._saved = []
            return PanelLoaded([])
        try:
            self._saved = self._addresses.list_addresses(self._user_id)
        except CollaboratorUnavailableError as e:
            self._logger.warning(
                "Error fetching addresses", extra={"session_id": self._controller.session_id, "reason": str(e)}
            )
            return PanelFailed(message="Could not load your saved addresses. Please try again.")
        return PanelLoaded(list(self._saved))

    def select_saved(self, address_id: str) -> BookingDraft:
        if self._saved is None:
            result = self.load_reference_data(self._controller.draft)
            if isinstance(result, PanelFailed):
                raise CollaboratorUnavailableError(result.message)
        if not any(address.id == address_id for address in self._saved or []):
            raise InvalidSelectionError(f"Unknown address: {address_id}")
        self._controller.update_form_data({"address_id": address_id, "new_address": None})
        return self._controller.draft

    def use_new_address(self, address: NewAddress) -> BookingDraft:
        missing = address.missing_fields()
        if missing:
            raise InvalidSelectionError(f"Missing address fields: {', '.join(missing)}")
        self._controller.update_form_data({"new_address": address, "address_id": None})
        return self._controller.draft

    def save_new_address(self, address: NewAddress) -> BookingDraft:
        """Create the address for a signed-in customer and select it."""
        missing = address.missing_fields()
        if missing:
            raise InvalidSelectionError(f"Missing address fields: {', '.join(missing)}")
        if not self._user_id:
            return self.use_new_address(address)
        created = self._addresses.create_address(self._user_id, address)
        self._saved = [created, *(self._saved or [])]
        self._logger.info(
            "Address saved", extra={"session_id": self._controller.session_id, "reason": created.id}
        )
        self._controller.update_form_data({"address_id": created.id, "new_address": None})
        return self._controller.draft
