"""
Price calculations for catalog items: discount, GST and display formatting.

Everything here is pure. Inputs are not validated; nonsensical inputs give
arithmetically consistent (if nonsensical) results.
"""
import math
from typing import Optional

from inventory_manager.schemas.pricing import PriceCalculation

GST_SLABS = (0, 5, 12, 18, 28)


def compute_final_price(
    price: float,
    discount_price: Optional[float] = None,
    gst_percentage: Optional[float] = None,
) -> PriceCalculation:
    """
    Calculate the price a customer pays including GST.

    The discounted price is taxed when one is set (a zero discount price counts
    as not set), otherwise the regular price is.

    Returns:
        PriceCalculation: base price, GST amount, final price and the GST rate used
    """
    gst_percentage = gst_percentage or 0
    base_price = discount_price if discount_price else price

    gst_amount = base_price * (gst_percentage / 100)
    final_price = base_price + gst_amount

    return PriceCalculation(
        base_price=base_price,
        gst_amount=gst_amount,
        final_price=final_price,
        gst_percentage=gst_percentage,
    )


def discount_percentage(original_price: float, discount_price: Optional[float]) -> int:
    """Whole-number discount (0-100); 0 when there is no real discount."""
    if not discount_price or discount_price >= original_price:
        return 0
    # Half rounds up, not to even
    return int(math.floor((original_price - discount_price) / original_price * 100 + 0.5))


def format_price(price: float, currency: str = "₹") -> str:
    return f"{currency}{price:.2f}"


def is_valid_gst_slab(gst_slab: Optional[float]) -> bool:
    if gst_slab is None:
        return True
    return gst_slab in GST_SLABS
