import enum
from typing import Any, Optional
from pydantic import BaseModel


class ErrorKind(str, enum.Enum):
    # Coupon validation
    EMPTY_CODE = "EMPTY_CODE"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    NOT_FOUND = "NOT_FOUND"
    EXPIRED = "EXPIRED"
    USAGE_LIMIT_REACHED = "USAGE_LIMIT_REACHED"
    BELOW_MINIMUM_ORDER = "BELOW_MINIMUM_ORDER"
    # Orders
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    ILLEGAL_TRANSITION = "ILLEGAL_TRANSITION"
    EMPTY_CART = "EMPTY_CART"
    PRODUCT_UNAVAILABLE = "PRODUCT_UNAVAILABLE"


class ActionResult(BaseModel):
    """Outcome of a business operation whose failures are expected and user-correctable."""
    success: bool
    message: Optional[str] = None
    error: Optional[ErrorKind] = None
    data: Any = None

    @classmethod
    def ok(cls, message: Optional[str] = None, data: Any = None) -> "ActionResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, error: ErrorKind, message: str) -> "ActionResult":
        return cls(success=False, error=error, message=message)
