from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.cart import CartTotalsRequest, CartTotalsResponse
from app.services.coupon_service import CouponService
from app.services.pricing_engine import PricingEngine
from app.utils.price import format_price

router = APIRouter(prefix="/cart", tags=["cart"])


@router.post("/totals", response_model=CartTotalsResponse)
def cart_totals(body: CartTotalsRequest, db: Session = Depends(get_db)):
    # Always recomputed from the submitted lines; nothing is cached
    coupon = None
    coupon_message = None
    if body.coupon_code is not None:
        subtotal = PricingEngine.calculate_subtotal(body.items)
        result = CouponService.validate_coupon(db, body.coupon_code, subtotal)
        coupon_message = result.message
        if result.success:
            coupon = result.data

    totals = PricingEngine.calculate_totals(body.items, coupon)
    return CartTotalsResponse(
        totals=totals,
        formatted_total=format_price(totals.total),
        coupon_code=coupon.code if coupon is not None else None,
        coupon_message=coupon_message,
    )
