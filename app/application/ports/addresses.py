from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.address import Address
from app.domain.entities.booking_draft import NewAddress


class AddressPort(ABC):
    @abstractmethod
    def list_addresses(self, user_id: str) -> list[Address]:
        """Saved addresses, default first then newest first."""
        raise NotImplementedError

    @abstractmethod
    def create_address(self, user_id: str, address: NewAddress) -> Address:
        raise NotImplementedError
