# services/pricing_service.py

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True)
class Totals:
    subtotal: float
    tax: float
    total: float


def as_number(value: Any) -> float:
    # Coerce a form value the way a browser's Number() would:
    # blank -> 0, unparseable -> nan.
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if text == "":
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def compute_totals(lines: Iterable[Any], discount: Any = 0, tax_rate: Any = 0) -> Totals:
    # lines are anything with quantity / unit_price attributes (CartLine).
    # No rounding happens here; values are rounded only for display/payload.
    subtotal = 0.0
    for line in lines:
        subtotal += as_number(line.quantity) * as_number(line.unit_price)

    tax = subtotal * as_number(tax_rate)
    raw_total = subtotal + tax - as_number(discount)

    # nan is passed through so a bad input stays visible instead of reading as 0
    total = raw_total if math.isnan(raw_total) else max(0.0, raw_total)
    return Totals(subtotal=subtotal, tax=tax, total=total)


def to_money(value: Any) -> float:
    # final rounding to 2 decimal places, at the display/payload boundary only
    return round(as_number(value), 2)


def format_money(value: Any) -> str:
    return f"${as_number(value):.2f}"
