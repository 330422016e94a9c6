"""
Pricing Matrix Builder - Precomputes breakdowns for every order type and size.

A matrix is built wholesale whenever an item's price or tax rates change and
is stored alongside the menu item. Two construction modes:
- from_item: derive everything from a stored menu item record
- from_definition: explicit {default, sizes} prices plus a GST config map
"""
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from .breakdown import compute
from .models import OrderTypePricing, PriceBreakdown, PricingMatrix, SourcePrice, TaxRatePair
from .numeric import normalize
from .order_types import DEFAULT_ORDER_TYPES, OrderTypeKey, resolve

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _size_price(size_value: Any, fallback: Any) -> Any:
    """Price of a size entry ({"price": x} or a bare number), else the fallback."""
    if isinstance(size_value, Mapping):
        price = size_value.get('price')
    else:
        price = size_value
    return fallback if price is None else price


def get_gst_percentages(item: Optional[Mapping], order_type: Any = "Dining") -> TaxRatePair:
    """
    Resolve the CGST/SGST percentages of a menu item for one order type.

    Looks in the item's per-order-type GST map first, then in the legacy flat
    columns ("dining_cgst_percentage", and the same with a stray leading
    space as written by older exports). Missing rates are 0.
    """
    item = item or {}
    key = resolve(order_type).value
    gst = item.get('gst') or item.get('gstRatesByOrderType') or {}
    source = gst.get(key) or {}

    def lookup(component: str) -> Any:
        for value in (
            source.get(component),
            item.get(f'{key}_{component}_percentage'),
            item.get(f' {key}_{component}_percentage'),
        ):
            if value is not None:
                return value
        return 0

    return TaxRatePair(cgst_percent=normalize(lookup('cgst')), sgst_percent=normalize(lookup('sgst')))


class PricingMatrixBuilder:
    """
    Builds PricingMatrix value objects.

    The clock is injectable so tests can pin `last_updated`.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or _utcnow

    def from_item(self, item: Mapping, order_types: Iterable[Any] = DEFAULT_ORDER_TYPES) -> PricingMatrix:
        """
        Build a matrix from a menu item record.

        Args:
            item: {price, sizes?: {key: {price}}, pricingMode?, gst?: {key: {cgst, sgst}}}
            order_types: Order type labels to populate

        Returns:
            PricingMatrix with one entry per resolved order type
        """
        includes_tax = item.get('pricingMode') != 'exclusive'
        flat_price = item.get('price')
        sizes = item.get('sizes') or {}

        size_prices = {
            size_key: _size_price(size_value, flat_price if flat_price is not None else 0)
            for size_key, size_value in sizes.items()
        }
        default_price = flat_price if not size_prices else None

        entries = {}
        for order_type in order_types:
            key = resolve(order_type)
            rates = get_gst_percentages(item, key)
            entries[key.value] = OrderTypePricing(
                cgst_percent=rates.cgst_percent,
                sgst_percent=rates.sgst_percent,
                default=self._breakdown(default_price, rates, includes_tax),
                sizes={
                    size_key: compute(price, rates.cgst_percent, rates.sgst_percent, includes_tax)
                    for size_key, price in size_prices.items()
                },
            )

        matrix = PricingMatrix(
            price_includes_tax=includes_tax,
            source_price_type='final' if includes_tax else 'base',
            source_price=SourcePrice(
                default=normalize(flat_price) if flat_price is not None else None,
                sizes={size_key: normalize(price) for size_key, price in size_prices.items()},
            ),
            last_updated=self.clock(),
            order_types=entries,
        )
        logger.debug("Built pricing matrix for item %s (%d order types, %d sizes)",
                     item.get('name', item.get('id')), len(entries), len(size_prices))
        return matrix

    def from_definition(
        self,
        price_definition: Optional[Mapping] = None,
        gst_config: Optional[Mapping] = None,
        includes_tax: bool = True,
    ) -> PricingMatrix:
        """
        Build a matrix from explicit prices and a GST config.

        Args:
            price_definition: {default?: price, sizes?: {key: price}}
            gst_config: {order_type_key: {cgst, sgst}}, iterated as given
            includes_tax: True if the entered prices already contain tax

        Returns:
            PricingMatrix with one entry per gst_config key
        """
        price_definition = price_definition or {}
        gst_config = gst_config or {}
        default_price = price_definition.get('default')
        sizes = price_definition.get('sizes') or {}

        entries = {}
        for key, value in gst_config.items():
            rates = value if isinstance(value, TaxRatePair) else TaxRatePair.from_dict(value)
            entries[key.value if isinstance(key, OrderTypeKey) else key] = OrderTypePricing(
                cgst_percent=rates.cgst_percent,
                sgst_percent=rates.sgst_percent,
                default=self._breakdown(default_price, rates, includes_tax),
                sizes={
                    size_key: compute(amount, rates.cgst_percent, rates.sgst_percent, includes_tax)
                    for size_key, amount in sizes.items()
                },
            )

        matrix = PricingMatrix(
            price_includes_tax=includes_tax,
            source_price_type='final' if includes_tax else 'base',
            source_price=SourcePrice(
                default=normalize(default_price) if default_price is not None else None,
                sizes={
                    size_key: normalize(amount)
                    for size_key, amount in sizes.items()
                    if amount is not None
                },
            ),
            last_updated=self.clock(),
            order_types=entries,
        )
        logger.debug("Built pricing matrix from definition (%d order types, %d sizes)",
                     len(entries), len(sizes))
        return matrix

    @staticmethod
    def _breakdown(amount: Any, rates: TaxRatePair, includes_tax: bool) -> Optional[PriceBreakdown]:
        if amount is None:
            return None
        return compute(amount, rates.cgst_percent, rates.sgst_percent, includes_tax)


def as_pricing_matrix(metadata: Union[PricingMatrix, Mapping, None]) -> Optional[PricingMatrix]:
    """Accept a PricingMatrix or its stored dict form."""
    if metadata is None or isinstance(metadata, PricingMatrix):
        return metadata
    if isinstance(metadata, Mapping) and metadata.get('orderTypes'):
        return PricingMatrix.from_dict(metadata)
    return None


def get_breakdown_from_metadata(
    matrix: Union[PricingMatrix, Mapping, None],
    order_type: Any = "Dining",
    size_key: Optional[str] = None,
) -> Optional[PriceBreakdown]:
    """
    Look up a stored breakdown.

    A size-specific breakdown wins over the order type's default. The result
    carries the entry's percentages and the matrix's tax direction.
    Returns None when the matrix, order type or breakdown is missing.
    """
    matrix = as_pricing_matrix(matrix)
    if matrix is None:
        return None

    entry = matrix.order_types.get(resolve(order_type).value)
    if entry is None:
        return None

    if size_key and size_key in entry.sizes:
        found = entry.sizes[size_key]
    elif entry.default is not None:
        found = entry.default
    else:
        return None

    return replace(
        found,
        cgst_percent=entry.cgst_percent,
        sgst_percent=entry.sgst_percent,
        price_includes_tax=matrix.price_includes_tax,
    )


def get_item_source_price(item: Optional[Mapping], size_key: Optional[str] = None) -> Optional[float]:
    """
    Recover the price the operator originally entered for an item or size.

    Uses the matrix's recorded source prices when present. Otherwise inclusive
    items report their stored (final) price and exclusive items the dining
    base price. Returns None when nothing is known.
    """
    item = item or {}
    sizes = item.get('sizes') or {}
    matrix = as_pricing_matrix(item.get('pricingMetadata'))

    if matrix is None:
        if size_key:
            price = _size_price(sizes.get(size_key), None)
        else:
            price = item.get('price')
        return normalize(price) if price else None

    if size_key:
        if size_key in matrix.source_price.sizes:
            return matrix.source_price.sizes[size_key]
        price = _size_price(sizes.get(size_key), None)
        if not price:
            return None
        if matrix.price_includes_tax:
            return normalize(price)
        breakdown = get_breakdown_from_metadata(matrix, OrderTypeKey.DINING, size_key)
        return breakdown.base_price if breakdown else normalize(price)

    if matrix.source_price.default is not None:
        return matrix.source_price.default

    price = item.get('price')
    breakdown = get_breakdown_from_metadata(matrix, OrderTypeKey.DINING)
    if breakdown is None or matrix.price_includes_tax:
        return normalize(price) if price else None
    return breakdown.base_price
