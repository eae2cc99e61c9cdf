from decimal import Decimal

import pytest

from coinwagon.units import format_amount, from_base_units


def test_from_base_units_satoshi():
    assert from_base_units(150000000, 8) == Decimal("1.5")


def test_from_base_units_wei_is_exact():
    assert from_base_units("1000000000000000001", 18) == Decimal(
        "1.000000000000000001"
    )


def test_from_base_units_zero():
    assert from_base_units(0, 8) == Decimal(0)


@pytest.mark.parametrize("value", ["1.5", "-100", "NaN"])
def test_from_base_units_rejects_invalid_amounts(value):
    with pytest.raises(ValueError):
        from_base_units(value, 8)


def test_format_amount_pads_fiat_places():
    assert format_amount(Decimal("67234.5"), 2) == "67234.50"


def test_format_amount_strips_trailing_zeros():
    assert format_amount(Decimal("1.50000000")) == "1.5"
    assert format_amount(Decimal("100851.750"), 2) == "100851.75"


def test_format_amount_keeps_extra_precision():
    assert format_amount(Decimal("16808.625"), 2) == "16808.625"


def test_format_amount_never_uses_exponent_notation():
    assert format_amount(Decimal("1E+3"), 2) == "1000.00"
    assert format_amount(Decimal("0.00000001")) == "0.00000001"
    assert format_amount(Decimal("0E-8")) == "0"


@pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity"])
def test_format_amount_rejects_non_finite(value):
    with pytest.raises(ValueError, match="non-finite"):
        format_amount(Decimal(value), 2)
