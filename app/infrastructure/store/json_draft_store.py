from __future__ import annotations

import json
import logging
import re
import threading
from datetime import datetime
from pathlib import Path
from typing import Any

from app.application.ports.draft_store import DraftStorePort
from app.application.utils.draft_payload import deserialize_draft, serialize_draft
from app.domain.entities.booking_draft import BookingDraft

DRAFT_KEY = "booking-draft"
DRAFT_VERSION = "1.0"
SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


class JsonDraftStore(DraftStorePort):
    def __init__(self, data_dir: str = "./data/drafts") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, session_id: str) -> threading.Lock:
        """Get or create a lock for a session_id."""
        with self._lock_lock:
            if session_id not in self._locks:
                self._locks[session_id] = threading.Lock()
            return self._locks[session_id]

    def _get_file_path(self, session_id: str) -> Path:
        if not SESSION_ID_PATTERN.match(session_id or ""):
            raise ValueError(f"Invalid session id: {session_id!r}")
        return self._data_dir / f"{session_id}.json"

    def _read_entry(self, file_path: Path) -> dict[str, Any]:
        """Return the stored entry under the draft key. Raises ValueError when the file cannot be decoded."""
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        entry = data.get(DRAFT_KEY) if isinstance(data, dict) else None
        if not isinstance(entry, dict):
            raise ValueError("missing draft entry")
        return entry

    def load(self, session_id: str) -> BookingDraft | None:
        file_path = self._get_file_path(session_id)
        with self._get_lock(session_id):
            if not file_path.exists():
                return None
            try:
                return deserialize_draft(self._read_entry(file_path))
            except ValueError as e:
                self._logger.warning(
                    "Invalid draft data structure, clearing draft",
                    extra={"session_id": session_id, "reason": str(e)},
                )
                file_path.unlink(missing_ok=True)
                return None
            except OSError as e:
                self._logger.error(
                    "Failed to read booking draft", extra={"session_id": session_id, "reason": str(e)}
                )
                return None

    def save(self, session_id: str, draft: BookingDraft) -> None:
        """Save the draft atomically."""
        entry = serialize_draft(draft)
        entry["saved_at"] = datetime.now().timestamp()
        entry["version"] = DRAFT_VERSION

        with self._get_lock(session_id):
            file_path = self._get_file_path(session_id)
            temp_path = file_path.with_suffix(".json.tmp")
            try:
                with open(temp_path, "w", encoding="utf-8") as f:
                    json.dump({DRAFT_KEY: entry}, f, indent=2, ensure_ascii=False)
                temp_path.replace(file_path)
            except OSError:
                temp_path.unlink(missing_ok=True)
                raise

    def clear(self, session_id: str) -> None:
        with self._get_lock(session_id):
            self._get_file_path(session_id).unlink(missing_ok=True)

    def has_draft(self, session_id: str) -> bool:
        return self._get_file_path(session_id).exists()

    def draft_age_hours(self, session_id: str, now_ts: float | None = None) -> int:
        file_path = self._get_file_path(session_id)
        with self._get_lock(session_id):
            try:
                saved_at = self._read_entry(file_path).get("saved_at")
            except (ValueError, OSError):
                return 0
        if not isinstance(saved_at, (int, float)):
            return 0
        if now_ts is None:
            now_ts = datetime.now().timestamp()
        return max(0, int((now_ts - saved_at) // 3600))
