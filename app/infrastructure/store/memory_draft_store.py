from __future__ import annotations

from datetime import datetime

from app.application.ports.draft_store import DraftStorePort
from app.domain.entities.booking_draft import BookingDraft


class MemoryDraftStore(DraftStorePort):
    def __init__(self) -> None:
        self._drafts: dict[str, BookingDraft] = {}
        self._saved_at: dict[str, float] = {}

    def load(self, session_id: str) -> BookingDraft | None:
        return self._drafts.get(session_id)

    def save(self, session_id: str, draft: BookingDraft) -> None:
        self._drafts[session_id] = draft
        self._saved_at[session_id] = datetime.now().timestamp()

    def clear(self, session_id: str) -> None:
        self._drafts.pop(session_id, None)
        self._saved_at.pop(session_id, None)

    def has_draft(self, session_id: str) -> bool:
        return session_id in self._drafts

    def draft_age_hours(self, session_id: str, now_ts: float | None = None) -> int:
        saved_at = self._saved_at.get(session_id)
        if saved_at is None:
            return 0
        if now_ts is None:
            now_ts = datetime.now().timestamp()
        return max(0, int((now_ts - saved_at) // 3600))
