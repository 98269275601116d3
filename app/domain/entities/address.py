from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Address:
    id: str
    name: str
    address_line_1: str
    city: str
    state: str
    postal_code: str
    country: str = "NG"
    type: str = "home"  # "home", "office", "other"
    address_line_2: str | None = None
    is_default: bool = False

    def one_line(self) -> str:
        return f"{self.address_line_1}, {self.city}, {self.state} {self.postal_code}"
