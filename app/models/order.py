import enum
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Enum, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


def _utcnow():
    return datetime.now(timezone.utc)


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    status = Column(Enum(OrderStatus, name="order_status"), default=OrderStatus.PENDING, nullable=False, index=True)
    # Frozen copy of the cart totals at creation time, in paise
    subtotal = Column(Integer, nullable=False)
    shipping = Column(Integer, default=0, nullable=False)
    discount = Column(Integer, default=0, nullable=False)
    total = Column(Integer, nullable=False)
    # Weak reference: no foreign key to coupons
    coupon_code = Column(String(50), nullable=True)
    customer_email = Column(String(255), nullable=True)
    customer_name = Column(String(200), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan", lazy="selectin")


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=True)
    name = Column(String(200), nullable=True)
    quantity = Column(Integer, nullable=False)
    price_at_purchase = Column(Integer, nullable=False)  # paise

    order = relationship("Order", back_populates="items")
