from typing import Optional, Sequence
from app.models.coupon import DiscountType
from app.schemas.cart import CartTotals, LineItem

# All amounts in paise
FREE_SHIPPING_THRESHOLD = 50000
SHIPPING_FEE = 5000


class PricingEngine:
    """Pure cart pricing: subtotal, shipping, coupon discount and payable total.

    `coupon` may be any object exposing `discount_type` and `discount_value`
    (the ORM row or a CouponResponse). Inputs are trusted to be non-negative.
    """

    @staticmethod
    def calculate_subtotal(items: Sequence[LineItem]) -> int:
        return sum(item.unit_price * item.quantity for item in items)

    @staticmethod
    def calculate_shipping(subtotal: int) -> int:
        return SHIPPING_FEE if subtotal < FREE_SHIPPING_THRESHOLD else 0

    @staticmethod
    def calculate_discount(subtotal: int, coupon=None) -> int:
        if coupon is None:
            return 0
        if coupon.discount_type == DiscountType.PERCENTAGE:
            # floor, never round up
            return (subtotal * coupon.discount_value) // 100
        if coupon.discount_type == DiscountType.FLAT:
            # not clamped here; the total is clamped instead
            return coupon.discount_value
        return 0

    @staticmethod
    def calculate_totals(items: Sequence[LineItem], coupon: Optional[object] = None) -> CartTotals:
        subtotal = PricingEngine.calculate_subtotal(items)
        shipping = PricingEngine.calculate_shipping(subtotal)
        discount = PricingEngine.calculate_discount(subtotal, coupon)
        total = max(0, subtotal + shipping - discount)
        return CartTotals(subtotal=subtotal, shipping=shipping, discount=discount, total=total)


calculate_totals = PricingEngine.calculate_totals
