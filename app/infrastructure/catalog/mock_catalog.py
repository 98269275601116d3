from __future__ import annotations

from app.application.ports.catalog import CatalogPort
from app.domain.entities.catalog import ServiceCategory, ServiceExtra, ServiceItem
from app.infrastructure.catalog.catalog_data import CATEGORIES, EXTRAS, ITEMS


class MockCatalog(CatalogPort):
    def __init__(
        self,
        categories: tuple[ServiceCategory, ...] | None = None,
        items: tuple[ServiceItem, ...] | None = None,
        extras: tuple[ServiceExtra, ...] | None = None,
    ) -> None:
        self._categories = list(categories if categories is not None else CATEGORIES)
        self._items = list(items if items is not None else ITEMS)
        self._extras = list(extras if extras is not None else EXTRAS)

    def list_categories(self) -> list[ServiceCategory]:
        return sorted(self._categories, key=lambda category: category.sort_order)

    def list_items(self, item_ids: list[str] | None = None) -> list[ServiceItem]:
        if item_ids is None:
            return list(self._items)
        return [item for item in self._items if item.id in item_ids]

    def list_extras(self, extra_ids: list[str] | None = None) -> list[ServiceExtra]:
        if extra_ids is None:
            return list(self._extras)
        return [extra for extra in self._extras if extra.id in extra_ids]
