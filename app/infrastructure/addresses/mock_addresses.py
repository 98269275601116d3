from __future__ import annotations

import logging
from dataclasses import asdict

from app.application.ports.addresses import AddressPort
from app.domain.entities.address import Address
from app.domain.entities.booking_draft import NewAddress


class MockAddressBook(AddressPort):
    def __init__(self, addresses: dict[str, list[Address]] | None = None) -> None:
        self._addresses: dict[str, list[Address]] = {k: list(v) for k, v in (addresses or {}).items()}
        self._logger = logging.getLogger(__name__)

    def list_addresses(self, user_id: str) -> list[Address]:
        saved = self._addresses.get(user_id, [])
        # Default first, then newest first (insertion order reversed).
        return sorted(reversed(saved), key=lambda address: not address.is_default)

    def create_address(self, user_id: str, address: NewAddress) -> Address:
        saved = self._addresses.setdefault(user_id, [])
        created = Address(id=f"mock_address_{sum(len(v) for v in self._addresses.values()) + 1}", **asdict(address))
        saved.append(created)
        self._logger.info("Mock address created", extra={"reason": created.id})
        return created
