from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.catalog import ServiceCategory, ServiceExtra, ServiceItem


class CatalogPort(ABC):
    @abstractmethod
    def list_categories(self) -> list[ServiceCategory]:
        """Active categories ordered by sort_order."""
        raise NotImplementedError

    @abstractmethod
    def list_items(self, item_ids: list[str] | None = None) -> list[ServiceItem]:
        """Active service items, optionally restricted to the given ids."""
        raise NotImplementedError

    @abstractmethod
    def list_extras(self, extra_ids: list[str] | None = None) -> list[ServiceExtra]:
        """Active service extras, optionally restricted to the given ids."""
        raise NotImplementedError
