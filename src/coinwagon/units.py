from __future__ import annotations

from decimal import Decimal


def from_base_units(value: int | str | Decimal, decimals: int) -> Decimal:
    """Convert an integer amount of base units (satoshi, wei) to whole coins.

    Args:
        value: Amount expressed in the chain's smallest unit.
        decimals: Number of base-unit decimal places for the chain.

    Returns:
        The exact amount as a Decimal, e.g. ``150000000`` with 8 decimals
        becomes ``Decimal("1.50000000")``.

    Raises:
        ValueError: If ``value`` is not an integral, non-negative amount.
    """
    amount = Decimal(str(value))
    if not amount.is_finite() or amount != amount.to_integral_value():
        raise ValueError(f"Base unit amount must be an integer, got {value!r}")
    if amount < 0:
        raise ValueError(f"Base unit amount must be non-negative, got {value!r}")
    return amount.scaleb(-decimals)


def format_amount(value: Decimal, min_places: int = 0) -> str:
    """Render a Decimal in plain notation without trailing zeros.

    ``min_places`` pads the fractional part, so fiat values keep cents:
    ``format_amount(Decimal("67234.5"), 2) == "67234.50"``.

    Raises:
        ValueError: If ``value`` is NaN or infinite.
    """
    if not value.is_finite():
        raise ValueError(f"Cannot format non-finite amount {value!r}")
    normalized = value.normalize()
    if normalized == 0:
        normalized = Decimal(0)
    exponent = int(normalized.as_tuple().exponent)
    if -exponent < min_places:
        normalized = normalized.quantize(Decimal(1).scaleb(-min_places))
    return format(normalized, "f")
