import json
import logging
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from gst_pricing.config.settings import get_settings
from gst_pricing.engine import CartAggregator, PricingMatrixBuilder, compute, get_breakdown_from_metadata

def debug():
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    print("GST config:")
    print(json.dumps(settings.gst_config(), indent=2))

    # Test Case: inclusive price that does not reconcile to the cent
    print("\n--- Inclusive 100 @ 9% + 9% ---")
    breakdown = compute(100, 9, 9, True)
    print(breakdown)
    print(f"base + gst = {breakdown.base_price + breakdown.gst_amount:.2f} (final kept at {breakdown.final_price:.2f})")

    # Test Case: sized item with the branch GST config
    print("\n--- Pricing matrix for a sized item ---")
    price_definition = {"default": None, "sizes": {"half": 180, "full": 320}}
    matrix = PricingMatrixBuilder().from_definition(price_definition, settings.gst_config(), settings.price_includes_tax)
    print(json.dumps(matrix.to_dict(), indent=2))

    half = get_breakdown_from_metadata(matrix, "Takeaway", "half")
    print(f"Takeaway half: {half}")

    print("\n--- Cart summary ---")
    cart = [
        {"name": "Paneer Tikka", "price": 100, "quantity": 2, "cgstPercent": 9, "sgstPercent": 9},
        {"name": "Lassi", "price": 60, "quantity": 1, "cgstPercent": 2.5, "sgstPercent": 2.5,
         "priceIncludesTax": False},
    ]
    summary = CartAggregator().summarize(cart, "Dining")
    print(json.dumps(summary.to_dict(), indent=2))

if __name__ == "__main__":
    debug()
