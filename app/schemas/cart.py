from pydantic import BaseModel, Field
from typing import List, Optional


class LineItem(BaseModel):
    unit_price: int = Field(..., ge=0, description="Price per unit in paise")
    quantity: int = Field(..., gt=0)


class CartTotals(BaseModel):
    subtotal: int
    shipping: int
    discount: int
    total: int


class CartTotalsRequest(BaseModel):
    items: List[LineItem] = Field(default_factory=list)
    coupon_code: Optional[str] = None


class CartTotalsResponse(BaseModel):
    totals: CartTotals
    formatted_total: str
    coupon_code: Optional[str] = None
    coupon_message: Optional[str] = None
