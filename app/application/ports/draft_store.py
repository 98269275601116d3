from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.booking_draft import BookingDraft


class DraftStorePort(ABC):
    @abstractmethod
    def load(self, session_id: str) -> BookingDraft | None:
        """Return the persisted draft, or None when absent or unreadable."""
        raise NotImplementedError

    @abstractmethod
    def save(self, session_id: str, draft: BookingDraft) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear(self, session_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def has_draft(self, session_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def draft_age_hours(self, session_id: str, now_ts: float | None = None) -> int:
        """Whole hours since the draft was last saved; 0 when unknown."""
        raise NotImplementedError
