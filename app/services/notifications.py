import logging
import smtplib
import time
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta
from email.message import EmailMessage
from typing import List, Optional, Union
from pydantic import BaseModel
from app import config
from app.models.order import OrderStatus
from app.utils.price import format_price

logger = logging.getLogger(__name__)


class NoticeItem(BaseModel):
    name: Optional[str] = None
    quantity: int
    price_at_purchase: int


class OrderNotice(BaseModel):
    """Detached snapshot of an order, safe to use after the session is closed."""
    order_id: int
    order_number: str
    status: OrderStatus
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    subtotal: int
    shipping: int
    discount: int
    total: int
    created_at: datetime
    items: List[NoticeItem] = []

    @classmethod
    def from_order(cls, order) -> "OrderNotice":
        return cls(
            order_id=order.id,
            order_number=f"#{order.id:06d}",
            status=order.status,
            customer_email=order.customer_email,
            customer_name=order.customer_name,
            subtotal=order.subtotal,
            shipping=order.shipping,
            discount=order.discount,
            total=order.total,
            created_at=order.created_at,
            items=[
                NoticeItem(name=i.name, quantity=i.quantity, price_at_purchase=i.price_at_purchase)
                for i in order.items
            ],
        )


def _long_date(d: Union[date, datetime]) -> str:
    return f"{d.day} {d.strftime('%B %Y')}"


def estimated_delivery_date(order_date: datetime, status: OrderStatus, today: Optional[date] = None) -> str:
    status = OrderStatus(status)
    if status == OrderStatus.DELIVERED:
        return "Delivered"
    if status == OrderStatus.CANCELLED:
        return "Cancelled"
    if status == OrderStatus.SHIPPED:
        today = today or date.today()
        return _long_date(today + timedelta(days=3))
    return _long_date(order_date + timedelta(days=7))


class Notifier(ABC):
    """Customer notification channel. Implementations may raise on failure."""

    @abstractmethod
    def send_order_confirmation(self, notice: OrderNotice) -> None:
        ...

    @abstractmethod
    def send_shipping_notice(self, notice: OrderNotice) -> None:
        ...

    @abstractmethod
    def send_delivery_notice(self, notice: OrderNotice) -> None:
        ...


def _compose(kind: str, notice: OrderNotice):
    name = notice.customer_name or "there"
    if kind == "send_order_confirmation":
        subject = f"Order Confirmation - Order {notice.order_number}"
        lines = [f"Hi {name}, thanks for your order {notice.order_number}."]
        lines += [f"  {i.quantity} x {i.name or 'Item'} @ {format_price(i.price_at_purchase)}" for i in notice.items]
        lines += [
            f"Subtotal: {format_price(notice.subtotal)}",
            f"Shipping: {format_price(notice.shipping)}",
            f"Discount: -{format_price(notice.discount)}",
            f"Total: {format_price(notice.total)}",
            f"Estimated delivery: {estimated_delivery_date(notice.created_at, OrderStatus.PENDING)}",
        ]
    elif kind == "send_shipping_notice":
        subject = f"Your Order {notice.order_number} Has Been Shipped"
        lines = [
            f"Hi {name}, your order {notice.order_number} is on its way.",
            f"Estimated delivery: {estimated_delivery_date(notice.created_at, OrderStatus.SHIPPED)}",
        ]
    else:
        subject = f"Your Order {notice.order_number} Has Been Delivered"
        lines = [f"Hi {name}, your order {notice.order_number} was delivered on {_long_date(date.today())}."]
    return subject, "\n".join(lines)


class LogNotifier(Notifier):
    """Writes notices to the log instead of sending them."""

    def _emit(self, kind: str, notice: OrderNotice) -> None:
        subject, _ = _compose(kind, notice)
        logger.info("Notice for order %s to %s: %s", notice.order_id, notice.customer_email, subject)

    def send_order_confirmation(self, notice: OrderNotice) -> None:
        self._emit("send_order_confirmation", notice)

    def send_shipping_notice(self, notice: OrderNotice) -> None:
        self._emit("send_shipping_notice", notice)

    def send_delivery_notice(self, notice: OrderNotice) -> None:
        self._emit("send_delivery_notice", notice)


class SmtpNotifier(Notifier):
    def __init__(self, host: str, port: int, user: Optional[str] = None,
                 password: Optional[str] = None, sender: str = "orders@localhost"):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.sender = sender

    def _send(self, kind: str, notice: OrderNotice) -> None:
        if not notice.customer_email:
            logger.info("Order %s has no customer email; skipping %s", notice.order_id, kind)
            return
        subject, body = _compose(kind, notice)
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = notice.customer_email
        msg.set_content(body)
        with smtplib.SMTP(self.host, self.port, timeout=10) as smtp:
            if self.user:
                smtp.starttls()
                smtp.login(self.user, self.password or "")
            smtp.send_message(msg)

    def send_order_confirmation(self, notice: OrderNotice) -> None:
        self._send("send_order_confirmation", notice)

    def send_shipping_notice(self, notice: OrderNotice) -> None:
        self._send("send_shipping_notice", notice)

    def send_delivery_notice(self, notice: OrderNotice) -> None:
        self._send("send_delivery_notice", notice)


_notifier: Optional[Notifier] = None


def get_notifier() -> Notifier:
    global _notifier
    if _notifier is None:
        if config.SMTP_HOST:
            _notifier = SmtpNotifier(config.SMTP_HOST, config.SMTP_PORT, config.SMTP_USER,
                                     config.SMTP_PASSWORD, config.MAIL_FROM)
        else:
            _notifier = LogNotifier()
    return _notifier


def dispatch_notice(notifier: Notifier, kind: str, notice: OrderNotice) -> bool:
    """Fire-and-forget delivery of one notice with a bounded retry.

    Never raises: every failure is logged and the caller's outcome stands.
    """
    send = getattr(notifier, kind)
    attempts = config.NOTIFY_MAX_ATTEMPTS
    for attempt in range(1, attempts + 1):
        try:
            send(notice)
            return True
        except Exception:
            logger.warning("Attempt %d/%d of %s for order %s failed",
                           attempt, attempts, kind, notice.order_id, exc_info=True)
            if attempt < attempts and config.NOTIFY_RETRY_DELAY > 0:
                time.sleep(config.NOTIFY_RETRY_DELAY * attempt)
    logger.error("Giving up on %s for order %s after %d attempts", kind, notice.order_id, attempts)
    return False
