"""
Price Breakdown Calculator - Splits one entered amount into base price and GST.

Resolution order:
1. Normalize CGST and SGST percentages, total rate = CGST + SGST
2. Inclusive: entered amount is the final price, base is divided out
3. Exclusive: entered amount is the base price, final is multiplied up
4. Each tax component is rounded on its own, GST = CGST + SGST
5. Exclusive final price is rebuilt from base + GST; inclusive keeps the
   entered amount even when base + GST is off by a cent

Products and quotients are taken in Decimal so that a price like 4.50 at
9% gives exactly 0.405 and rounds up to 0.41.
"""
from typing import Any

from .models import PriceBreakdown, TaxRatePair
from .numeric import normalize, to_decimal


def compute(amount: Any, cgst_percent: Any = 0, sgst_percent: Any = 0,
            includes_tax: bool = True) -> PriceBreakdown:
    """
    Compute the tax breakdown of a single amount.

    Args:
        amount: Entered price (number-like, invalid input counts as 0)
        cgst_percent: Central GST rate in percent
        sgst_percent: State GST rate in percent
        includes_tax: True if `amount` already contains tax

    Returns:
        PriceBreakdown with every monetary value rounded to 2 decimals
    """
    cgst = normalize(cgst_percent)
    sgst = normalize(sgst_percent)
    cgst_rate = to_decimal(cgst)
    sgst_rate = to_decimal(sgst)
    total_rate = cgst_rate + sgst_rate

    if includes_tax:
        final_price = normalize(amount)
        if total_rate > 0:
            base_price = normalize(to_decimal(final_price) / (1 + total_rate / 100))
        else:
            base_price = final_price
    else:
        base_price = normalize(amount)
        final_price = normalize(to_decimal(base_price) * (1 + total_rate / 100))

    base = to_decimal(base_price)
    cgst_amount = normalize(base * cgst_rate / 100)
    sgst_amount = normalize(base * sgst_rate / 100)
    gst_amount = normalize(to_decimal(cgst_amount) + to_decimal(sgst_amount))

    if not includes_tax:
        final_price = normalize(base + to_decimal(gst_amount))

    return PriceBreakdown(
        base_price=base_price,
        final_price=final_price,
        cgst_amount=cgst_amount,
        sgst_amount=sgst_amount,
        gst_amount=gst_amount,
        cgst_percent=cgst,
        sgst_percent=sgst,
        price_includes_tax=bool(includes_tax),
    )


def compute_for_rates(amount: Any, rates: TaxRatePair, includes_tax: bool = True) -> PriceBreakdown:
    """Compute a breakdown from a TaxRatePair."""
    return compute(amount, rates.cgst_percent, rates.sgst_percent, includes_tax)
