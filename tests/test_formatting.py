import math

import pytest

from minefinance.formatting import (
    format_currency,
    format_currency_short,
    format_npv_precise,
    format_ratio,
    normalize_unit,
    to_fixed,
)


def test_short_currency_defaults_to_millions():
    assert format_currency_short(15) == "$15.00M"
    assert format_currency_short(-13.486100676) == "$-13.49M"


@pytest.mark.parametrize("unit,want", [("k", "$400.00k"), ("B", "$400.00B"), ("$k", "$400.00k")])
def test_short_currency_units(unit, want):
    assert format_currency_short(400, unit) == want


def test_short_currency_blank_is_zero():
    assert format_currency_short("") == "$0.00M"
    assert format_currency_short(None) == "$0.00M"


def test_short_currency_has_no_grouping():
    assert format_currency_short(1234567.891) == "$1234567.89M"


def test_unknown_unit_rejected():
    with pytest.raises(ValueError):
        normalize_unit("T")


def test_halves_round_away_from_zero_on_exact_binary_value():
    assert to_fixed(0.125) == "0.13"
    assert to_fixed(-0.125) == "-0.13"
    # 1.005 is stored just below 1.005
    assert to_fixed(1.005) == "1.00"


def test_negative_zero_prints_unsigned():
    assert to_fixed(-0.0) == "0.00"
    assert to_fixed(-0.001) == "-0.00"


def test_non_finite_values():
    assert to_fixed(math.inf) == "Infinity"
    assert to_fixed(-math.inf) == "-Infinity"
    assert to_fixed(math.nan) == "NaN"
    assert format_currency_short(math.inf) == "$InfinityM"


def test_high_precision_npv():
    assert format_npv_precise(1.23456789) == "$1.234568M"
    assert format_npv_precise(-13.486100676, "k") == "$-13.486101k"


def test_full_currency_scales_millions_and_groups():
    assert format_currency(1.5) == "$1,500,000.00"
    assert format_currency(-0.001234) == "-$1,234.00"
    assert format_currency("") == "$0.00"


def test_ratio():
    assert format_ratio(0.730277986) == "0.73x"
    assert format_ratio(9999.0) == "9999.00x"


def test_display_does_not_touch_value():
    v = 30.520976788
    format_currency_short(v)
    format_npv_precise(v)
    assert v == 30.520976788
