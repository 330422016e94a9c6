"""Engine subpackage - GST breakdowns, pricing matrices and cart totals."""
from .numeric import normalize
from .order_types import OrderTypeKey, resolve, resolve_strict, require_order_type
from .breakdown import compute
from .pricing_matrix import (
    PricingMatrixBuilder,
    get_breakdown_from_metadata,
    get_gst_percentages,
    get_item_source_price,
)
from .cart import CartAggregator
from .models import (
    TaxRatePair,
    PriceBreakdown,
    OrderTypePricing,
    SourcePrice,
    PricingMatrix,
    CartLineItem,
    CartLine,
    CartSummary,
)

__all__ = [
    'normalize', 'OrderTypeKey', 'resolve', 'resolve_strict', 'require_order_type',
    'compute', 'PricingMatrixBuilder', 'get_breakdown_from_metadata',
    'get_gst_percentages', 'get_item_source_price', 'CartAggregator',
    'TaxRatePair', 'PriceBreakdown', 'OrderTypePricing', 'SourcePrice',
    'PricingMatrix', 'CartLineItem', 'CartLine', 'CartSummary',
]
