"""Tests for pricing matrix construction and breakdown lookup."""
import dataclasses
import os
import sys
from datetime import datetime, timezone

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from gst_pricing.engine import (
    PricingMatrix,
    PricingMatrixBuilder,
    compute,
    get_breakdown_from_metadata,
    get_gst_percentages,
    get_item_source_price,
)

FIXED_NOW = datetime(2025, 3, 1, 12, 30, tzinfo=timezone.utc)

GST_CONFIG = {
    "dining": {"cgst": 2.5, "sgst": 2.5},
    "takeaway": {"cgst": 9, "sgst": 9},
    "onlineorder": {"cgst": 6, "sgst": 6},
}


@pytest.fixture(scope="module")
def builder():
    return PricingMatrixBuilder(clock=lambda: FIXED_NOW)


@pytest.fixture
def sized_matrix(builder):
    """Inclusive item with a default price and two sizes."""
    return builder.from_definition({"default": 150, "sizes": {"half": 100, "full": 180}}, GST_CONFIG, True)


def test_definition_matrix_shape(sized_matrix):
    assert sized_matrix.price_includes_tax is True
    assert sized_matrix.source_price_type == "final"
    assert sized_matrix.source_price.default == 150
    assert sized_matrix.source_price.sizes == {"half": 100, "full": 180}
    assert sized_matrix.last_updated == FIXED_NOW
    assert list(sized_matrix.order_types) == ["dining", "takeaway", "onlineorder"]

    takeaway = sized_matrix.order_types["takeaway"]
    assert takeaway.cgst_percent == 9
    assert takeaway.sgst_percent == 9
    assert takeaway.default == compute(150, 9, 9, True)
    assert takeaway.sizes["half"] == compute(100, 9, 9, True)
    assert takeaway.sizes["half"].base_price == 84.75


def test_definition_without_default_price(builder):
    matrix = builder.from_definition({"sizes": {"quarter": 60}}, GST_CONFIG, False)
    assert matrix.source_price_type == "base"
    assert matrix.source_price.default is None
    for entry in matrix.order_types.values():
        assert entry.default is None
        assert entry.sizes["quarter"].base_price == 60

    assert matrix.order_types["dining"].sizes["quarter"].final_price == 63


def test_definition_skips_missing_size_source_prices(builder):
    matrix = builder.from_definition({"default": 10, "sizes": {"half": None}}, {"dining": {}}, True)
    assert matrix.source_price.sizes == {}
    assert matrix.order_types["dining"].cgst_percent == 0
    assert matrix.order_types["dining"].default.final_price == 10


def test_empty_gst_config_gives_empty_matrix(builder):
    matrix = builder.from_definition({"default": 100}, {}, True)
    assert matrix.order_types == {}
    assert get_breakdown_from_metadata(matrix, "Dining") is None


def test_size_breakdown_takes_priority_over_default(sized_matrix):
    breakdown = get_breakdown_from_metadata(sized_matrix, "Takeaway", "half")
    assert breakdown.final_price == 100
    assert breakdown.base_price == 84.75
    assert breakdown.cgst_percent == 9
    assert breakdown.price_includes_tax is True


def test_default_breakdown_when_size_missing(sized_matrix):
    assert get_breakdown_from_metadata(sized_matrix, "Online Order", "large").final_price == 150
    assert get_breakdown_from_metadata(sized_matrix, "Online Order").final_price == 150


def test_unknown_order_type_reads_dining_entry(sized_matrix):
    breakdown = get_breakdown_from_metadata(sized_matrix, "Dine-in", "full")
    assert breakdown == sized_matrix.order_types["dining"].sizes["full"]


def test_lookup_misses(builder):
    assert get_breakdown_from_metadata(None, "Dining") is None
    matrix = builder.from_definition({"sizes": {"half": 100}}, {"takeaway": {"cgst": 9, "sgst": 9}}, True)
    assert get_breakdown_from_metadata(matrix, "Dining", "half") is None
    assert get_breakdown_from_metadata(matrix, "Takeaway") is None


def test_lookup_accepts_stored_dict(sized_matrix):
    stored = sized_matrix.to_dict()
    assert stored["lastUpdated"] == "2025-03-01T12:30:00+00:00"
    breakdown = get_breakdown_from_metadata(stored, "Takeaway", "half")
    assert breakdown == get_breakdown_from_metadata(sized_matrix, "Takeaway", "half")


def test_from_dict_accepts_legacy_field_names():
    stored = {
        "priceIncludesTax": True,
        "lastUpdated": "2024-11-25T20:40:49.000Z",
        "orderTypes": {
            "dining": {
                "cgstPercentage": 2.5,
                "sgstPercentage": 2.5,
                "sizes": {
                    "half": {"basePrice": 95.24, "finalPrice": 100, "cgstAmount": 2.38,
                             "sgstAmount": 2.38, "gstValue": 4.76},
                },
            },
        },
    }
    matrix = PricingMatrix.from_dict(stored)
    assert matrix.source_price_type == "final"
    assert matrix.last_updated.year == 2024
    breakdown = get_breakdown_from_metadata(matrix, "Dining", "half")
    assert breakdown.gst_amount == 4.76
    assert breakdown.cgst_percent == 2.5


def test_matrix_is_never_patched_in_place(builder, sized_matrix):
    with pytest.raises(dataclasses.FrozenInstanceError):
        sized_matrix.price_includes_tax = False
    rebuilt = builder.from_definition({"default": 200}, GST_CONFIG, True)
    assert rebuilt is not sized_matrix
    assert sized_matrix.order_types["dining"].default.final_price == 150


def test_item_matrix_with_sizes(builder):
    item = {
        "name": "Biryani",
        "price": 250,
        "sizes": {"half": {"price": 150}, "full": {}},
        "gst": {"dining": {"cgst": 2.5, "sgst": 2.5}, "takeaway": {"cgst": 9, "sgst": 9}},
    }
    matrix = builder.from_item(item)
    assert matrix.price_includes_tax is True
    assert set(matrix.order_types) == {"dining", "takeaway", "onlineorder"}

    takeaway = matrix.order_types["takeaway"]
    assert takeaway.default is None
    assert takeaway.sizes["half"] == compute(150, 9, 9, True)
    # Size without its own price falls back to the item price
    assert takeaway.sizes["full"] == compute(250, 9, 9, True)

    online = matrix.order_types["onlineorder"]
    assert online.cgst_percent == 0
    assert online.sizes["half"].base_price == 150
    assert matrix.source_price.sizes == {"half": 150, "full": 250}


def test_item_matrix_flat_price_exclusive(builder):
    item = {"price": 100, "pricingMode": "exclusive", "gst": {"takeaway": {"cgst": 2.5, "sgst": 2.5}}}
    matrix = builder.from_item(item, order_types=["Takeaway"])
    assert list(matrix.order_types) == ["takeaway"]
    assert matrix.source_price_type == "base"
    breakdown = get_breakdown_from_metadata(matrix, "Takeaway")
    assert breakdown.final_price == 105
    assert breakdown.price_includes_tax is False


def test_gst_percentages_lookup_order():
    item = {
        "gst": {"dining": {"cgst": 9}},
        "dining_sgst_percentage": "9",
        " takeaway_cgst_percentage": 2.5,
        "takeaway_sgst_percentage": 2.5,
    }
    dining = get_gst_percentages(item, "Dining")
    assert (dining.cgst_percent, dining.sgst_percent) == (9, 9)
    takeaway = get_gst_percentages(item, "Takeaway")
    assert (takeaway.cgst_percent, takeaway.sgst_percent) == (2.5, 2.5)
    assert get_gst_percentages(None, "Online").total_percent == 0


def test_item_source_price(builder):
    exclusive = builder.from_definition({"default": 100, "sizes": {"half": 60}}, GST_CONFIG, False)
    item = {"price": 105, "sizes": {"half": {"price": 63}, "full": {"price": 120}}, "pricingMetadata": exclusive}
    assert get_item_source_price(item) == 100
    assert get_item_source_price(item, "half") == 60
    # No recorded source price for "full": exclusive falls back to the dining base
    assert get_item_source_price(item, "full") == 100
    assert get_item_source_price(item, "large") is None


def test_item_source_price_without_matrix():
    assert get_item_source_price({"price": 99.5}) == 99.5
    assert get_item_source_price({"sizes": {"half": {"price": 40}}}, "half") == 40
    assert get_item_source_price({}) is None


def test_item_source_price_inclusive_stored_matrix(builder):
    matrix = builder.from_definition({"sizes": {"half": 100}}, GST_CONFIG, True).to_dict()
    matrix["sourcePrice"] = {"default": None, "sizes": {}}
    item = {"price": 180, "sizes": {"half": {"price": 100}}, "pricingMetadata": matrix}
    assert get_item_source_price(item, "half") == 100
    assert get_item_source_price(item) == 180


def test_raw_key_lookup_reads_dining_entry(builder):
    matrix = builder.from_definition(
        {"default": 100},
        {"dining": {"cgst": 9, "sgst": 9}, "takeaway": {"cgst": 2.5, "sgst": 2.5}},
        True,
    )
    breakdown = get_breakdown_from_metadata(matrix, "takeaway")
    assert breakdown.cgst_percent == 9
    assert breakdown.base_price == 84.75


def test_matrix_mappings_are_read_only(sized_matrix):
    with pytest.raises(TypeError):
        sized_matrix.order_types["takeaway"] = None
    with pytest.raises(TypeError):
        sized_matrix.order_types["dining"].sizes["half"] = None
    with pytest.raises(TypeError):
        sized_matrix.source_price.sizes["half"] = 1
    assert sized_matrix.to_dict()["orderTypes"]["dining"]["sizes"]["half"]["finalPrice"] == 100
