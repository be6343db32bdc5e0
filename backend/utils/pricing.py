# backend/utils/pricing.py
"""Cart and order totals.

All amounts are integer cents. Items are anything exposing ``unit_price``,
``quantity`` and the optional ``size_surcharge`` / ``design_surcharge``
attributes, so cart lines and order lines are priced the same way.
"""
from typing import Iterable, NamedTuple

FREE_SHIPPING_THRESHOLD = 100_000  # 1000.00
FLAT_SHIPPING = 5_000  # 50.00


class Totals(NamedTuple):
    subtotal: int
    shipping: int
    total: int
    items_count: int


def unit_total(item) -> int:
    return item.unit_price + (item.size_surcharge or 0) + (item.design_surcharge or 0)


def line_total(item) -> int:
    return unit_total(item) * item.quantity


def subtotal(items: Iterable) -> int:
    return sum(line_total(it) for it in items)


def shipping_for(amount: int) -> int:
    # Free shipping only strictly above the threshold
    return 0 if amount > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING


def items_count(items: Iterable) -> int:
    return sum(it.quantity for it in items)


def totals(items) -> Totals:
    items = list(items)
    if not items:
        return Totals(subtotal=0, shipping=0, total=0, items_count=0)
    sub = subtotal(items)
    ship = shipping_for(sub)
    return Totals(subtotal=sub, shipping=ship, total=sub + ship, items_count=items_count(items))


def to_amount(cents) -> float:
    """Convert cents to the two-decimal amount shown to clients."""
    return round((cents or 0) / 100, 2)
