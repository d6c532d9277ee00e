from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from typing import Optional
from datetime import datetime, timezone
from app.models.coupon import DiscountType


def to_utc(v: Optional[datetime]) -> Optional[datetime]:
    # Stored naive on SQLite, so aware values must already be UTC wall-clock
    if v is not None and v.tzinfo is not None:
        return v.astimezone(timezone.utc)
    return v


# Request schemas
class CouponCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    discount_type: DiscountType
    discount_value: int = Field(..., ge=0, description="Percentage (0-100) or flat amount in paise")
    min_order_value: int = Field(default=0, ge=0, description="Minimum subtotal in paise")
    max_uses: int = Field(..., gt=0)
    expires_at: datetime

    @field_validator("code")
    @classmethod
    def canonical_code(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("code must not be blank")
        return v

    @field_validator("expires_at")
    @classmethod
    def utc_expiry(cls, v):
        return to_utc(v)

    @model_validator(mode="after")
    def check_percentage(self):
        if self.discount_type == DiscountType.PERCENTAGE and self.discount_value > 100:
            raise ValueError("percentage discount_value must be between 0 and 100")
        return self


class CouponUpdate(BaseModel):
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[int] = Field(default=None, ge=0)
    min_order_value: Optional[int] = Field(default=None, ge=0)
    max_uses: Optional[int] = Field(default=None, gt=0)
    expires_at: Optional[datetime] = None

    @field_validator("expires_at")
    @classmethod
    def utc_expiry(cls, v):
        return to_utc(v)


# Response schemas
class CouponResponse(BaseModel):
    id: int
    code: str
    discount_type: DiscountType
    discount_value: int
    min_order_value: int
    max_uses: int
    current_uses: int
    expires_at: datetime

    # Pydantic v2 style config (replaces class Config)
    model_config = ConfigDict(from_attributes=True)


class CouponValidateRequest(BaseModel):
    code: str = ""
    order_subtotal: int = Field(..., description="Cart subtotal in paise")


class CouponValidateResponse(BaseModel):
    valid: bool
    message: str
    error: Optional[str] = None
    coupon: Optional[CouponResponse] = None
