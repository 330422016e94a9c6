"""
Cart Aggregator - Sums per-line GST breakdowns into order-level totals.

Each line's amounts are multiplied by quantity and rounded individually;
the order totals are plain sums of those rounded line values, rounded once
more at the end.
"""
import logging
from decimal import Decimal
from typing import Any, Iterable, Mapping, Union

from .breakdown import compute
from .models import CartLine, CartLineItem, CartSummary
from .numeric import normalize, to_decimal
from .order_types import resolve_strict

logger = logging.getLogger(__name__)


def _quantity(value: Any) -> int:
    """Whole quantity of a line; missing, invalid or zero counts as 1."""
    try:
        quantity = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 1
    return quantity or 1


class CartAggregator:
    """Builds CartSummary objects from cart line items."""

    def summarize(
        self,
        line_items: Iterable[Union[CartLineItem, Mapping]],
        order_type: Any = "Dining",
    ) -> CartSummary:
        """
        Aggregate cart lines into invoice totals.

        Args:
            line_items: CartLineItem objects or cart records
                ({price, quantity, cgstPercent, sgstPercent, priceIncludesTax, ...})
            order_type: Order type label stamped on the summary and every line

        Returns:
            CartSummary with normalized totals and enriched lines
        """
        summary = CartSummary(order_type=order_type)

        resolution = resolve_strict(order_type)
        if not resolution.recognized:
            logger.warning("Unrecognized order type %r, treating as %s", order_type, resolution.key.value)
            summary.add_warning(f"Unrecognized order type {order_type!r}, using {resolution.key.label}")

        total_base = total_cgst = total_sgst = total_gst = total_final = Decimal(0)

        for line_item in line_items or []:
            if isinstance(line_item, CartLineItem):
                item = line_item
                source = dict(line_item.extra)
                source.update(price=item.price, quantity=item.quantity)
            else:
                item = CartLineItem.from_dict(line_item)
                source = dict(line_item)

            quantity = _quantity(item.quantity)
            amount = item.price if item.price is not None else item.final_price
            breakdown = compute(
                amount if amount is not None else 0,
                item.cgst_percent,
                item.sgst_percent,
                item.price_includes_tax is not False,
            )

            line_base = normalize(to_decimal(breakdown.base_price) * quantity)
            line_cgst = normalize(to_decimal(breakdown.cgst_amount) * quantity)
            line_sgst = normalize(to_decimal(breakdown.sgst_amount) * quantity)
            line_gst = normalize(to_decimal(breakdown.gst_amount) * quantity)
            line_final = normalize(to_decimal(breakdown.final_price) * quantity)

            total_base += to_decimal(line_base)
            total_cgst += to_decimal(line_cgst)
            total_sgst += to_decimal(line_sgst)
            total_gst += to_decimal(line_gst)
            total_final += to_decimal(line_final)

            summary.items.append(CartLine(
                order_type=order_type,
                quantity=quantity,
                breakdown=breakdown,
                subtotal=line_final,
                source=source,
            ))

        summary.total_base_amount = normalize(total_base)
        summary.total_cgst_amount = normalize(total_cgst)
        summary.total_sgst_amount = normalize(total_sgst)
        summary.total_gst_amount = normalize(total_gst)
        summary.total_final_amount = normalize(total_final)

        return summary
