from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP


def cents_to_amount(cents: int | None) -> float | None:
    """Integer cents to a 2dp currency number for JSON responses."""
    if cents is None:
        return None
    return float(Decimal(cents) / 100)


def format_cents(cents: int | None) -> str:
    """Display form used on printed artifacts: 1250 -> "$12.50"."""
    return f"${Decimal(cents or 0) / 100:,.2f}"


def prorate_cents(minutes: int, hourly_rate_cents: int) -> int:
    """Pay for a number of minutes at an hourly rate, rounded half up to the cent."""
    pay = Decimal(minutes) * Decimal(hourly_rate_cents) / Decimal(60)
    return int(pay.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
