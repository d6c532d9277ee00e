from typing import Dict, FrozenSet
from app.models.order import OrderStatus

ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

_missing = set(OrderStatus) - set(ALLOWED_TRANSITIONS)
if _missing:
    raise RuntimeError(f"No transition rule for order status: {sorted(s.value for s in _missing)}")

TERMINAL_STATUSES = frozenset(s for s, targets in ALLOWED_TRANSITIONS.items() if not targets)


def allowed_targets(current: OrderStatus) -> FrozenSet[OrderStatus]:
    return ALLOWED_TRANSITIONS[OrderStatus(current)]


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    return OrderStatus(new) in allowed_targets(current)
