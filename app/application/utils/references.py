from __future__ import annotations

import secrets
import string
from datetime import datetime

_ALPHABET = string.ascii_uppercase + string.digits


def generate_payment_reference(now: datetime | None = None) -> str:
    """BOOK_YYYYMMDD_HHMMSS_XXXXXX"""
    now = now or datetime.now()
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(6))
    return f"BOOK_{now.strftime('%Y%m%d_%H%M%S')}_{suffix}"
