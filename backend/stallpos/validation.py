from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any


# Maximum price: RM 9,999,999.99 (999,999,999 cents)
# This prevents nonsensical amounts from a mistyped field
MAX_PRICE_CENTS = 999_999_999

_CENT = Decimal("0.01")


class ValidationError(ValueError):
    """400-level input problem."""


def parse_cents(value: Any, *, field: str = "amount") -> int:
    """
    Convert a money value to integer cents.

    Accepts int cents, Decimal, or decimal text ("8.50", " 12 ").
    Text and Decimal are read as ringgit and rounded half-up to the cent;
    ints are already cents.
    Raises ValidationError for blanks, non-numeric text, NaN/Infinity and
    values above MAX_PRICE_CENTS.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} is required")

    if isinstance(value, int):
        cents = value
    else:
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValidationError(f"{field} is required")
            try:
                amount = Decimal(stripped)
            except InvalidOperation:
                raise ValidationError(f"{field} must be a number")
        elif isinstance(value, Decimal):
            amount = value
        else:
            raise ValidationError(f"{field} must be a number")

        if not amount.is_finite():
            raise ValidationError(f"{field} must be a finite number")
        cents = int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    if abs(cents) > MAX_PRICE_CENTS:
        raise ValidationError(f"{field} exceeds the maximum allowed amount")
    return cents


def parse_int(value: Any, *, field: str) -> int:
    """
    Strict integer parsing - rejects floats, decimals and scientific notation.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{field} must be an integer")
        # Reject scientific notation (e.g., "1e15", "1E10")
        if "e" in stripped.lower():
            raise ValidationError(f"{field} must be a plain integer (scientific notation not allowed)")
        # Reject decimal points (e.g., "12.5")
        if "." in stripped:
            raise ValidationError(f"{field} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    raise ValidationError(f"{field} must be an integer")


def format_cents(cents: int) -> str:
    """Render cents as a plain two-decimal amount ("1234" -> "12.34")."""
    return str((Decimal(cents) / 100).quantize(_CENT))
