from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceCategory:
    id: str
    name: str
    description: str | None = None
    sort_order: int = 0


@dataclass(frozen=True)
class ServiceItem:
    id: str
    category_id: str
    name: str
    base_price: float
    unit: str = "item"
    min_quantity: int = 1
    max_quantity: int = 10
    description: str | None = None


@dataclass(frozen=True)
class ServiceExtra:
    id: str
    name: str
    price: float
    description: str | None = None


@dataclass(frozen=True)
class CatalogSnapshot:
    categories: tuple[ServiceCategory, ...]
    items: tuple[ServiceItem, ...]
    extras: tuple[ServiceExtra, ...]

    def find_item(self, item_id: str) -> ServiceItem | None:
        return next((item for item in self.items if item.id == item_id), None)

    def find_extra(self, extra_id: str) -> ServiceExtra | None:
        return next((extra for extra in self.extras if extra.id == extra_id), None)
