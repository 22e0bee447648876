"""Parsing and display of monetary amounts and stock counts."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from nexus_pos.errors import ValidationError

_CENT = Decimal("0.01")


def parse_amount(raw: str | float | int, field: str = "amount") -> float:
    """Parse operator input as a non-negative, finite currency amount."""
    if isinstance(raw, str):
        text = raw.strip().lstrip("$").replace(",", "")
        if not text:
            raise ValidationError(f"{field} is required")
        try:
            value = float(text)
        except ValueError:
            raise ValidationError(f"{field} must be a number, got {raw!r}") from None
    else:
        value = float(raw)

    if not math.isfinite(value):
        raise ValidationError(f"{field} must be a finite number")
    if value < 0:
        raise ValidationError(f"{field} must not be negative")
    return value


def parse_stock(raw: str | int, field: str = "stock") -> int:
    """Parse operator input as a non-negative whole number of units."""
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            raise ValidationError(f"{field} is required")
        try:
            value = int(text)
        except ValueError:
            raise ValidationError(f"{field} must be a whole number, got {raw!r}") from None
    else:
        value = int(raw)
    if value < 0:
        raise ValidationError(f"{field} must not be negative")
    return value


def round_money(amount: float) -> Decimal:
    # Exact binary value, ties away from zero, as fixed-point displays round.
    return Decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP)


def format_money(amount: float) -> str:
    if amount < 0:
        return f"-${round_money(-amount)}"
    return f"${round_money(amount)}"
