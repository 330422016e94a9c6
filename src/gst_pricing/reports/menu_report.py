"""
Menu pricing table - one row per item × size × order type.

Feeds the menu export; writing the sheet is left to the caller.
"""
from typing import Iterable, Mapping, Optional

import pandas as pd

from ..engine.breakdown import compute
from ..engine.numeric import normalize
from ..engine.order_types import OrderTypeKey
from ..engine.pricing_matrix import (
    as_pricing_matrix,
    get_breakdown_from_metadata,
    get_gst_percentages,
    get_item_source_price,
)

MENU_COLUMNS = ['itemName', 'size', 'orderType', 'basePrice', 'finalPrice']

SIZE_LABELS = {
    'quarter': 'Quarter',
    'half': 'Half',
    'full': 'Full',
    'small': 'Small',
    'medium': 'Medium',
    'large': 'Large',
}


def format_size_label(size_key: Optional[str]) -> str:
    """Display label for a size key ("half" -> "Half", None -> "Single")."""
    if not size_key:
        return 'Single'
    return SIZE_LABELS.get(size_key) or size_key[:1].upper() + size_key[1:]


def _item_size_keys(item: Mapping) -> list:
    sizes = item.get('sizes') or {}
    if item.get('hasSizes', True) and sizes:
        return list(sizes.keys())
    return [None]


def _fallback_amount(item: Mapping, size_key: Optional[str], includes_tax: bool):
    """Amount to price when the item has no usable matrix entry."""
    if not includes_tax:
        return get_item_source_price(item, size_key) or 0
    if size_key:
        size = (item.get('sizes') or {}).get(size_key) or {}
        price = size.get('price') if isinstance(size, Mapping) else size
        return price or 0
    return item.get('price') or 0


def build_menu_pricing_rows(items: Iterable[Mapping]) -> list[dict]:
    """Base and final price of every item, size and order type."""
    rows = []
    for item in items or []:
        matrix = as_pricing_matrix(item.get('pricingMetadata'))
        if matrix is not None:
            includes_tax = matrix.price_includes_tax
        else:
            includes_tax = (item.get('pricingMode') or 'inclusive') != 'exclusive'

        for size_key in _item_size_keys(item):
            for order_type in OrderTypeKey:
                breakdown = get_breakdown_from_metadata(matrix, order_type, size_key)
                if breakdown is None:
                    rates = get_gst_percentages(item, order_type)
                    breakdown = compute(
                        _fallback_amount(item, size_key, includes_tax),
                        rates.cgst_percent,
                        rates.sgst_percent,
                        includes_tax,
                    )
                rows.append({
                    'itemName': item.get('name'),
                    'size': format_size_label(size_key),
                    'orderType': order_type.label,
                    'basePrice': normalize(breakdown.base_price),
                    'finalPrice': normalize(breakdown.final_price),
                })
    return rows


def build_menu_pricing_frame(items: Iterable[Mapping]) -> pd.DataFrame:
    """Menu pricing rows as a DataFrame (empty frame keeps the columns)."""
    return pd.DataFrame(build_menu_pricing_rows(items), columns=MENU_COLUMNS)
