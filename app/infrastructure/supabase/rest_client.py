from __future__ import annotations

import logging
from typing import Any

import httpx

from app.application.exceptions import CollaboratorUnavailableError


class SupabaseRestClient:
    """Thin PostgREST client for the hosted database tables the wizard reads."""

    def __init__(self, base_url: str, api_key: str, access_token: str | None = None, timeout: float = 10.0) -> None:
        self._base_url = base_url.rstrip("/") + "/rest/v1"
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {access_token or api_key}",
            "Content-Type": "application/json",
        }
        self._client = httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def select(self, table: str, params: dict[str, str] | None = None) -> list[dict[str, Any]]:
        query = {"select": "*", **(params or {})}
        try:
            response = self._client.get(f"{self._base_url}/{table}", params=query, headers=self._headers)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Supabase select failed", extra={"reason": f"{table}: {e}"})
            raise CollaboratorUnavailableError(f"Failed to fetch {table}") from e
        if not isinstance(data, list):
            return []
        return [row for row in data if isinstance(row, dict)]

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        headers = {**self._headers, "Prefer": "return=representation"}
        try:
            response = self._client.post(f"{self._base_url}/{table}", json=row, headers=headers)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Supabase insert failed", extra={"reason": f"{table}: {e}"})
            raise CollaboratorUnavailableError(f"Failed to create {table} row") from e
        if isinstance(data, list) and data and isinstance(data[0], dict):
            return data[0]
        if isinstance(data, dict):
            return data
        raise CollaboratorUnavailableError(f"Empty insert response for {table}")


def in_filter(ids: list[str]) -> str:
    return "in.(" + ",".join(ids) + ")"
