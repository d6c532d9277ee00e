import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional
from fastapi import BackgroundTasks
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.models.order import Order, OrderItem, OrderStatus
from app.models.product import Product
from app.schemas.cart import LineItem
from app.schemas.common import ActionResult, ErrorKind
from app.schemas.order import OrderCreate
from app.services.coupon_service import CouponService
from app.services.notifications import Notifier, OrderNotice, dispatch_notice
from app.services.order_status import can_transition
from app.services.pricing_engine import PricingEngine

logger = logging.getLogger(__name__)

NOTICE_FOR_STATUS = {
    OrderStatus.SHIPPED: "send_shipping_notice",
    OrderStatus.DELIVERED: "send_delivery_notice",
}


def _schedule_notice(notifier: Notifier, kind: str, notice: OrderNotice,
                     background_tasks: Optional[BackgroundTasks]) -> None:
    if background_tasks is not None:
        background_tasks.add_task(dispatch_notice, notifier, kind, notice)
    else:
        dispatch_notice(notifier, kind, notice)


class OrderService:
    """Order creation at checkout and the admin status workflow"""

    @staticmethod
    def get_order(db: Session, order_id: int) -> Optional[Order]:
        return db.query(Order).filter(Order.id == order_id).first()

    @staticmethod
    def get_orders(db: Session, status: Optional[OrderStatus] = None,
                   skip: int = 0, limit: int = 100) -> List[Order]:
        limit = min(max(limit, 1), 500)
        q = db.query(Order)
        if status is not None:
            q = q.filter(Order.status == status)
        return q.order_by(Order.id.desc()).offset(skip).limit(limit).all()

    @staticmethod
    def create_order(db: Session, order_data: OrderCreate, notifier: Notifier,
                     background_tasks: Optional[BackgroundTasks] = None) -> ActionResult:
        """Freeze the cart into a PENDING order.

        Totals are priced from live product prices and snapshotted onto the
        order. Order rows, the one-time stock decrement and the coupon usage
        increment are committed together or not at all.
        """
        if not order_data.items:
            return ActionResult.fail(ErrorKind.EMPTY_CART, "Cart is empty")

        quantities: Dict[int, int] = {}
        for item in order_data.items:
            quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity

        products = {p.id: p for p in db.query(Product).filter(Product.id.in_(list(quantities))).all()}
        for product_id in quantities:
            product = products.get(product_id)
            if product is None or not product.is_active:
                return ActionResult.fail(ErrorKind.PRODUCT_UNAVAILABLE, f"Product {product_id} is not available")

        line_items = [LineItem(unit_price=products[pid].price, quantity=qty) for pid, qty in quantities.items()]

        coupon = None
        if order_data.coupon_code and order_data.coupon_code.strip():
            subtotal = PricingEngine.calculate_subtotal(line_items)
            checked = CouponService.validate_coupon(db, order_data.coupon_code, subtotal)
            if not checked.success:
                return checked
            coupon = checked.data

        totals = PricingEngine.calculate_totals(line_items, coupon)

        try:
            order = Order(
                status=OrderStatus.PENDING,
                subtotal=totals.subtotal,
                shipping=totals.shipping,
                discount=totals.discount,
                total=totals.total,
                coupon_code=coupon.code if coupon is not None else None,
                customer_email=order_data.customer_email,
                customer_name=order_data.customer_name,
            )
            order.items = [
                OrderItem(
                    product_id=pid,
                    name=products[pid].name,
                    quantity=qty,
                    price_at_purchase=products[pid].price,
                )
                for pid, qty in quantities.items()
            ]
            db.add(order)
            for pid, qty in quantities.items():
                products[pid].stock = Product.stock - qty

            if coupon is not None and not CouponService.increment_coupon_usage(db, coupon.code, commit=False):
                db.rollback()
                return ActionResult.fail(ErrorKind.USAGE_LIMIT_REACHED, "This coupon has reached its usage limit")
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

        db.refresh(order)
        logger.info("Created order %s total=%s coupon=%s", order.id, order.total, order.coupon_code)
        _schedule_notice(notifier, "send_order_confirmation", OrderNotice.from_order(order), background_tasks)
        return ActionResult.ok(message="Order created successfully", data=order)

    @staticmethod
    def update_order_status(db: Session, order_id: int, new_status, notifier: Notifier,
                            background_tasks: Optional[BackgroundTasks] = None) -> ActionResult:
        """Move an order to `new_status`. Caller must already be an admin.

        Commit phase: the status write and, on cancellation, stock restoration
        for every item run in one transaction. Notify phase: shipping and
        delivery notices go out after the commit and cannot affect the result.
        """
        order = db.query(Order).filter(Order.id == order_id).first()
        if order is None:
            return ActionResult.fail(ErrorKind.ORDER_NOT_FOUND, "Order not found")

        current = order.status
        try:
            target = OrderStatus(new_status)
        except ValueError:
            target = None
        if target is None or not can_transition(current, target):
            label = target.value if target is not None else new_status
            logger.warning("Rejected status change for order %s: %s -> %s", order_id, current.value, label)
            return ActionResult.fail(ErrorKind.ILLEGAL_TRANSITION, f"Cannot transition from {current.value} to {label}")

        try:
            # Conditional on the status we validated against, so a concurrent
            # change cannot apply side effects twice
            result = db.execute(
                update(Order)
                .where(Order.id == order_id, Order.status == current)
                .values(status=target, updated_at=datetime.now(timezone.utc))
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                db.rollback()
                return ActionResult.fail(
                    ErrorKind.ILLEGAL_TRANSITION,
                    f"Cannot transition from {current.value} to {target.value}: order was modified concurrently",
                )

            if target == OrderStatus.CANCELLED:
                restock: Dict[int, int] = {}
                for item in order.items:
                    if item.product_id is not None:
                        restock[item.product_id] = restock.get(item.product_id, 0) + item.quantity
                for product_id, quantity in restock.items():
                    db.execute(
                        update(Product)
                        .where(Product.id == product_id)
                        .values(stock=Product.stock + quantity)
                        .execution_options(synchronize_session=False)
                    )
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

        db.refresh(order)
        logger.info("Order %s moved %s -> %s", order_id, current.value, target.value)

        kind = NOTICE_FOR_STATUS.get(target)
        if kind is not None:
            _schedule_notice(notifier, kind, OrderNotice.from_order(order), background_tasks)

        return ActionResult.ok(message="Order status updated successfully", data=order)
