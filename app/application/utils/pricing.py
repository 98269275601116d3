from __future__ import annotations

from dataclasses import dataclass

from app.domain.entities.booking_draft import BookingDraft
from app.domain.entities.catalog import ServiceExtra, ServiceItem

CURRENCY_SYMBOLS = {"NGN": "₦", "USD": "$", "GBP": "£", "EUR": "€"}


@dataclass(frozen=True)
class PricedLine:
    kind: str  # "service", "extra"
    catalog_id: str
    name: str
    quantity: int
    unit_price: float
    line_total: float


@dataclass(frozen=True)
class PriceBreakdown:
    lines: tuple[PricedLine, ...]
    total: float
    missing_ids: tuple[str, ...] = ()


def price_draft(
    draft: BookingDraft,
    items: list[ServiceItem],
    extras: list[ServiceExtra],
) -> PriceBreakdown:
    """
    Price the draft against the catalog as it is now.
    Lines whose id is no longer in the catalog are reported in missing_ids
    and left out of the total.
    """
    items_by_id = {item.id: item for item in items}
    extras_by_id = {extra.id: extra for extra in extras}
    lines: list[PricedLine] = []
    missing: list[str] = []

    for service in draft.services:
        item = items_by_id.get(service.service_item_id)
        if item is None:
            missing.append(service.service_item_id)
            continue
        lines.append(
            PricedLine(
                kind="service",
                catalog_id=item.id,
                name=item.name,
                quantity=service.quantity,
                unit_price=item.base_price,
                line_total=item.base_price * service.quantity,
            )
        )

    for chosen in draft.extras:
        extra = extras_by_id.get(chosen.service_extra_id)
        if extra is None:
            missing.append(chosen.service_extra_id)
            continue
        lines.append(
            PricedLine(
                kind="extra",
                catalog_id=extra.id,
                name=extra.name,
                quantity=chosen.quantity,
                unit_price=extra.price,
                line_total=extra.price * chosen.quantity,
            )
        )

    total = sum(line.line_total for line in lines)
    return PriceBreakdown(lines=tuple(lines), total=total, missing_ids=tuple(missing))


def to_minor_units(amount: float) -> int:
    return int(round(amount * 100))


def format_currency(amount: float, currency: str = "NGN") -> str:
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    return f"{symbol}{amount:,.2f}"
