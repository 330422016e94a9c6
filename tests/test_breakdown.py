"""Tests for the single-amount GST breakdown calculator."""
import dataclasses
import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from gst_pricing.engine import TaxRatePair, compute, normalize
from gst_pricing.engine.breakdown import compute_for_rates

# Standard GST slabs, split evenly between CGST and SGST
GST_SLABS = [0, 5, 12, 18, 28]


def test_inclusive_keeps_entered_price():
    """Inclusive 100 @ 18%: base + GST is 100.01 but the final price stays 100."""
    b = compute(100, 9, 9, True)
    assert b.base_price == 84.75
    assert b.cgst_amount == 7.63
    assert b.sgst_amount == 7.63
    assert b.gst_amount == 15.26
    assert b.final_price == 100
    assert normalize(b.base_price + b.gst_amount) == 100.01


def test_exclusive_adds_tax():
    b = compute(100, 2.5, 2.5, False)
    assert b.base_price == 100
    assert b.cgst_amount == 2.5
    assert b.sgst_amount == 2.5
    assert b.gst_amount == 5
    assert b.final_price == 105
    assert b.price_includes_tax is False


@pytest.mark.parametrize("slab", GST_SLABS)
@pytest.mark.parametrize("base", [10, 100, 250, 1000])
def test_exclusive_final_matches_rate_multiplier(base, slab):
    half = slab / 2
    b = compute(base, half, half, False)
    assert b.final_price == normalize(base * (1 + slab / 100))
    assert b.final_price == normalize(b.base_price + b.gst_amount)


@pytest.mark.parametrize("slab", GST_SLABS)
@pytest.mark.parametrize("price", [10, 99.99, 1000])
def test_round_trip_across_slabs(price, slab):
    half = slab / 2
    final = compute(price, half, half, False).final_price
    base = compute(final, half, half, True).base_price
    assert abs(base - price) <= 0.02


@pytest.mark.parametrize("amount,cgst,sgst,includes_tax", [
    (100, 9, 9, True),
    (73.5, 2.5, 2.5, True),
    (199, 6, 6, False),
    (0.99, 14, 14, True),
    (1234.56, 9, 9, False),
])
def test_components_reconcile(amount, cgst, sgst, includes_tax):
    b = compute(amount, cgst, sgst, includes_tax)
    assert b.gst_amount == normalize(b.cgst_amount + b.sgst_amount)


@pytest.mark.parametrize("amount,cgst,sgst,expected_component,expected_final", [
    (4.5, 9, 9, 0.41, 5.32),      # 4.50 x 9% = 0.405
    (4.6, 2.5, 2.5, 0.12, 4.84),  # 4.60 x 2.5% = 0.115
    (1.4, 2.5, 2.5, 0.04, 1.48),  # 1.40 x 2.5% = 0.035
])
def test_exact_decimal_ties_round_up(amount, cgst, sgst, expected_component, expected_final):
    b = compute(amount, cgst, sgst, False)
    assert b.cgst_amount == expected_component
    assert b.sgst_amount == expected_component
    assert b.final_price == expected_final

def test_zero_rate_inclusive_has_no_tax():
    b = compute(50, 0, 0, True)
    assert b.base_price == b.final_price == 50
    assert b.gst_amount == 0


def test_invalid_inputs_degrade_to_zero():
    b = compute("not a price", None, "", True)
    assert b.base_price == 0
    assert b.final_price == 0
    assert b.gst_amount == 0
    assert b.cgst_percent == 0
    assert b.sgst_percent == 0


def test_rates_are_normalized():
    b = compute(100, "9.004", 9.005, False)
    assert b.cgst_percent == 9.0
    assert b.sgst_percent == 9.01


def test_compute_for_rates():
    assert compute_for_rates(100, TaxRatePair(9, 9), True) == compute(100, 9, 9, True)


def test_breakdown_is_immutable():
    b = compute(100, 9, 9, True)
    with pytest.raises(dataclasses.FrozenInstanceError):
        b.final_price = 1


def test_to_dict_uses_record_field_names():
    assert compute(100, 2.5, 2.5, False).to_dict() == {
        "basePrice": 100.0,
        "finalPrice": 105.0,
        "cgstAmount": 2.5,
        "sgstAmount": 2.5,
        "gstAmount": 5.0,
        "cgstPercent": 2.5,
        "sgstPercent": 2.5,
        "priceIncludesTax": False,
    }
