import enum
from sqlalchemy import Column, Integer, String, Enum, DateTime, Index, CheckConstraint, func
from app.database import Base


class DiscountType(str, enum.Enum):
    PERCENTAGE = "PERCENTAGE"
    FLAT = "FLAT"


class Coupon(Base):
    __tablename__ = "coupons"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(50), nullable=False, unique=True, index=True)
    discount_type = Column(Enum(DiscountType, name="discount_type"), nullable=False)
    discount_value = Column(Integer, nullable=False)  # percentage or paise
    min_order_value = Column(Integer, default=0, nullable=False)  # paise
    max_uses = Column(Integer, nullable=False)
    current_uses = Column(Integer, default=0, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("max_uses > 0", name="ck_coupons_max_uses_positive"),
        Index("ix_coupons_expires_at", "expires_at"),
    )
