# streetfood_connect/services/order_status.py
"""Order lifecycle: the statuses a supplier may move an order through."""

from typing import Dict, FrozenSet

from streetfood_connect.middleware.exceptions import InvalidStatusTransition

PENDING = "pending"
CONFIRMED = "confirmed"
IN_TRANSIT = "in_transit"
DELIVERED = "delivered"
CANCELLED = "cancelled"

STATUSES = (PENDING, CONFIRMED, IN_TRANSIT, DELIVERED, CANCELLED)

TRANSITIONS: Dict[str, FrozenSet[str]] = {
    PENDING: frozenset({CONFIRMED, CANCELLED}),
    CONFIRMED: frozenset({IN_TRANSIT, CANCELLED}),
    IN_TRANSIT: frozenset({DELIVERED, CANCELLED}),
    DELIVERED: frozenset(),
    CANCELLED: frozenset(),
}

TERMINAL = frozenset(s for s, nxt in TRANSITIONS.items() if not nxt)

LABELS = {
    PENDING: "Pending",
    CONFIRMED: "Confirmed",
    IN_TRANSIT: "In Transit",
    DELIVERED: "Delivered",
    CANCELLED: "Cancelled",
}

ACCEPT = CONFIRMED
REJECT = CANCELLED


def allowed_next(current: str) -> FrozenSet[str]:
    return TRANSITIONS.get(current, frozenset())


def can_transition(current: str, requested: str) -> bool:
    return requested in allowed_next(current)


def validate_transition(current: str, requested: str) -> str:
    if not can_transition(current, requested):
        raise InvalidStatusTransition(current, requested)
    return requested


def is_terminal(status: str) -> bool:
    return status in TERMINAL


def status_label(status: str) -> str:
    return LABELS.get(status, "Unknown")
