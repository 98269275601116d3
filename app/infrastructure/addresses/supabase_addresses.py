from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from app.application.exceptions import CollaboratorUnavailableError
from app.application.ports.addresses import AddressPort
from app.domain.entities.address import Address
from app.domain.entities.booking_draft import NewAddress
from app.infrastructure.supabase.rest_client import SupabaseRestClient


class SupabaseAddressBook(AddressPort):
    def __init__(self, client: SupabaseRestClient) -> None:
        self._client = client
        self._logger = logging.getLogger(__name__)

    def list_addresses(self, user_id: str) -> list[Address]:
        rows = self._client.select(
            "addresses",
            {"user_id": f"eq.{user_id}", "order": "is_default.desc,created_at.desc"},
        )
        addresses = []
        for row in rows:
            address = _parse_address(row)
            if address is None:
                self._logger.warning("Skipping malformed address", extra={"reason": str(row.get("id"))})
                continue
            addresses.append(address)
        return addresses

    def create_address(self, user_id: str, address: NewAddress) -> Address:
        row = self._client.insert("addresses", {"user_id": user_id, "is_default": False, **asdict(address)})
        created = _parse_address(row)
        if created is None:
            raise CollaboratorUnavailableError("Failed to create address")
        return created


def _parse_address(row: dict[str, Any]) -> Address | None:
    try:
        return Address(
            id=str(row["id"]),
            type=row.get("type") or "home",
            name=str(row["name"]),
            address_line_1=str(row["address_line_1"]),
            address_line_2=row.get("address_line_2"),
            city=str(row["city"]),
            state=str(row["state"]),
            postal_code=str(row["postal_code"]),
            country=row.get("country") or "NG",
            is_default=bool(row.get("is_default", False)),
        )
    except (KeyError, TypeError):
        return None
