"""
Order Type Resolver - Maps free-form order type labels to canonical keys.

Waterfall:
1. OrderTypeKey members pass through
2. Exact label match ("Dining", "Takeaway", "Online Order", ...)
3. Fallback: DINING (covers other casings and the raw keys like "takeaway")
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..errors import UnknownOrderTypeError


class OrderTypeKey(str, Enum):
    """Canonical channel of sale. Each carries its own GST rate pair."""
    DINING = "dining"
    TAKEAWAY = "takeaway"
    ONLINE_ORDER = "onlineorder"

    @property
    def label(self) -> str:
        return ORDER_TYPE_LABELS[self]


ORDER_TYPE_KEYS: dict[str, OrderTypeKey] = {
    "Dining": OrderTypeKey.DINING,
    "Takeaway": OrderTypeKey.TAKEAWAY,
    "Online Order": OrderTypeKey.ONLINE_ORDER,
    "Online": OrderTypeKey.ONLINE_ORDER,
    "OnlineOrder": OrderTypeKey.ONLINE_ORDER,
}

ORDER_TYPE_LABELS: dict[OrderTypeKey, str] = {
    OrderTypeKey.DINING: "Dining",
    OrderTypeKey.TAKEAWAY: "Takeaway",
    OrderTypeKey.ONLINE_ORDER: "Online Order",
}

DEFAULT_ORDER_TYPES = tuple(ORDER_TYPE_LABELS.values())


@dataclass(frozen=True)
class OrderTypeResolution:
    """Outcome of a label lookup, keeping whether the label was known."""
    key: OrderTypeKey
    recognized: bool
    label: Any = None


def resolve_strict(label: Any) -> OrderTypeResolution:
    """Resolve a label and report whether it was recognized."""
    if isinstance(label, OrderTypeKey):
        return OrderTypeResolution(key=label, recognized=True, label=label)

    if isinstance(label, str) and label in ORDER_TYPE_KEYS:
        return OrderTypeResolution(key=ORDER_TYPE_KEYS[label], recognized=True, label=label)

    return OrderTypeResolution(key=OrderTypeKey.DINING, recognized=False, label=label)


def resolve(label: Any) -> OrderTypeKey:
    """
    Resolve an order type label to its canonical key.

    Unknown labels (other casings, None, empty) silently become DINING.
    Use resolve_strict() or require_order_type() to detect them.
    """
    return resolve_strict(label).key


def require_order_type(label: Any) -> OrderTypeKey:
    """Resolve a label, raising UnknownOrderTypeError when it is not recognized."""
    resolution = resolve_strict(label)
    if not resolution.recognized:
        raise UnknownOrderTypeError(label)
    return resolution.key


def display_label(key: Optional[Any]) -> str:
    """Human-readable label for a key or label ("Online" -> "Online Order")."""
    if isinstance(key, str) and not isinstance(key, OrderTypeKey):
        try:
            return OrderTypeKey(key).label
        except ValueError:
            pass
    return resolve(key).label
