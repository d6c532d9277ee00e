from datetime import datetime, timezone
from typing import Callable, Optional
from app.schemas.common import ActionResult, ErrorKind
from app.utils.price import format_price


def canonical_code(code: str) -> str:
    return code.strip().upper()


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; stored values are always UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def validate_coupon(
    code: Optional[str],
    order_subtotal: int,
    lookup: Callable[[str], Optional[object]],
    now: Optional[datetime] = None,
) -> ActionResult:
    """Check a coupon code against an order subtotal (paise).

    Rules run in a fixed order and the first failing one is reported. `lookup`
    receives the canonical (uppercased) code and returns the coupon or None.
    On success the coupon is returned untouched in `data`; usage is not counted
    here.
    """
    if not code or not code.strip():
        return ActionResult.fail(ErrorKind.EMPTY_CODE, "Please enter a coupon code")

    if order_subtotal <= 0:
        return ActionResult.fail(ErrorKind.INVALID_AMOUNT, "Invalid order amount")

    coupon = lookup(canonical_code(code))
    if coupon is None:
        return ActionResult.fail(ErrorKind.NOT_FOUND, "Invalid coupon code")

    now = now or datetime.now(timezone.utc)
    if not as_utc(now) < as_utc(coupon.expires_at):
        return ActionResult.fail(ErrorKind.EXPIRED, "This coupon has expired")

    if coupon.current_uses >= coupon.max_uses:
        return ActionResult.fail(ErrorKind.USAGE_LIMIT_REACHED, "This coupon has reached its usage limit")

    if order_subtotal < coupon.min_order_value:
        return ActionResult.fail(
            ErrorKind.BELOW_MINIMUM_ORDER,
            f"Minimum order value of {format_price(coupon.min_order_value)} required for this coupon",
        )

    return ActionResult.ok(message="Coupon applied successfully", data=coupon)
