from __future__ import annotations

import logging
from typing import Any

from app.application.ports.catalog import CatalogPort
from app.domain.entities.catalog import ServiceCategory, ServiceExtra, ServiceItem
from app.infrastructure.supabase.rest_client import SupabaseRestClient, in_filter


class SupabaseCatalog(CatalogPort):
    def __init__(self, client: SupabaseRestClient) -> None:
        self._client = client
        self._logger = logging.getLogger(__name__)

    def list_categories(self) -> list[ServiceCategory]:
        rows = self._client.select("service_categories", {"is_active": "eq.true", "order": "sort_order"})
        return [category for category in (self._parse_category(row) for row in rows) if category]

    def list_items(self, item_ids: list[str] | None = None) -> list[ServiceItem]:
        params = {"is_active": "eq.true", "order": "created_at"}
        if item_ids:
            params["id"] = in_filter(item_ids)
        rows = self._client.select("service_items", params)
        return [item for item in (self._parse_item(row) for row in rows) if item]

    def list_extras(self, extra_ids: list[str] | None = None) -> list[ServiceExtra]:
        params = {"is_active": "eq.true", "order": "created_at"}
        if extra_ids:
            params["id"] = in_filter(extra_ids)
        rows = self._client.select("service_extras", params)
        return [extra for extra in (self._parse_extra(row) for row in rows) if extra]

    def _parse_item(self, row: dict[str, Any]) -> ServiceItem | None:
        try:
            return ServiceItem(
                id=str(row["id"]),
                category_id=str(row["category_id"]),
                name=str(row["name"]),
                base_price=float(row["base_price"]),
                unit=row.get("unit") or "item",
                min_quantity=int(row.get("min_quantity") or 1),
                max_quantity=int(row.get("max_quantity") or 10),
                description=row.get("description"),
            )
        except (KeyError, TypeError, ValueError):
            self._logger.warning("Skipping malformed service item", extra={"reason": str(row.get("id"))})
            return None

    def _parse_extra(self, row: dict[str, Any]) -> ServiceExtra | None:
        try:
            return ServiceExtra(
                id=str(row["id"]),
                name=str(row["name"]),
                price=float(row["price"]),
                description=row.get("description"),
            )
        except (KeyError, TypeError, ValueError):
            self._logger.warning("Skipping malformed service extra", extra={"reason": str(row.get("id"))})
            return None

    def _parse_category(self, row: dict[str, Any]) -> ServiceCategory | None:
        if not row.get("id") or not row.get("name"):
            return None
        try:
            return ServiceCategory(
                id=str(row["id"]),
                name=str(row["name"]),
                description=row.get("description"),
                sort_order=int(row.get("sort_order") or 0),
            )
        except (TypeError, ValueError):
            self._logger.warning("Skipping malformed service category", extra={"reason": str(row.get("id"))})
            return None
