"""Order aggregate — the purchase record.

The Order owns its line items and the delivery-status lifecycle.
Totals and price snapshots are fixed when the order is created.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from fulfillment.domain.exceptions import ValidationError
from fulfillment.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "Pending"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"

    @property
    def next(self) -> OrderStatus | None:
        """The legal successor, or None for the terminal status."""
        return _SUCCESSORS.get(self)

    @staticmethod
    def from_label(label: str) -> OrderStatus:
        """Parse a persisted status label.

        Accepts the display label, the enum name and the legacy labels
        written by older versions of the orders file.
        """
        key = label.strip()
        for status in OrderStatus:
            if key in (status.value, status.name):
                return status
        if key in _LEGACY_LABELS:
            return _LEGACY_LABELS[key]
        raise ValidationError(f"Unknown order status: {label!r}")


_SUCCESSORS = {
    OrderStatus.PENDING: OrderStatus.SHIPPED,
    OrderStatus.SHIPPED: OrderStatus.DELIVERED,
}

_LEGACY_LABELS = {
    "待发货": OrderStatus.PENDING,
    "已发货": OrderStatus.SHIPPED,
    "已签收": OrderStatus.DELIVERED,
}


@dataclass(frozen=True)
class OrderLineItem:
    """Captures the name and price of an item at order-creation time.

    Later catalog edits never reach an existing order (price lock).
    """

    item_id: str
    item_name: str
    unit_price: Money  # locked at order-creation time
    quantity: Quantity

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class InsufficientStock:
    """Why an order could not be created.

    Returned (not raised) by ``OrderLedger.create_order`` so callers can
    adjust the basket and retry.
    """

    item_id: str
    item_name: str
    requested: int
    available: int

    @property
    def message(self) -> str:
        return (
            f"Insufficient stock for {self.item_name} "
            f"(requested {self.requested}, available {self.available})"
        )

    def __str__(self) -> str:
        return self.message


ORDER_ID_PREFIX = "ORD"


def generate_order_id(user_id: str, at: datetime) -> str:
    """Derive an order id from the purchaser and the creation second.

    Same inputs always give the same id. Two orders from one user within
    the same second collide; the ledger resolves that case. The user id
    is stripped the same way ``Order.create`` stores it.
    """
    seed = f"{user_id.strip()}_{int(at.timestamp())}".encode("utf-8")
    digest = hashlib.sha256(seed).hexdigest()[:16].upper()
    return f"{ORDER_ID_PREFIX}{digest}"


@dataclass
class Order:
    """Aggregate root for purchases.

    Use ``Order.create()`` for new orders. The ``__init__`` stays plain so
    the store can reconstitute persisted orders, including their stored
    ``total_amount``, without recomputing anything.
    """

    order_id: str
    user_id: str
    items: list[OrderLineItem]
    order_time: datetime
    total_amount: Money
    shipping_address: str
    status: OrderStatus = OrderStatus.PENDING
    status_change_time: datetime | None = None

    def __post_init__(self) -> None:
        if self.status_change_time is None:
            self.status_change_time = self.order_time

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_id: str,
        user_id: str,
        items: list[OrderLineItem],
        shipping_address: str,
        at: datetime,
    ) -> Order:
        """Create a new Pending order, enforcing all invariants."""
        if not user_id or not user_id.strip():
            raise ValidationError("User id is required")
        if not items:
            raise ValidationError("Order must contain at least one item")

        total = Money.total(item.line_total for item in items)

        at = at.replace(microsecond=0)
        return Order(
            order_id=order_id,
            user_id=user_id.strip(),
            items=list(items),
            order_time=at,
            total_amount=total,
            shipping_address=shipping_address.strip(),
            status=OrderStatus.PENDING,
            status_change_time=at,
        )

    # --- State transitions ----------------------------------------------------

    def set_status(self, new_status: OrderStatus, at: datetime) -> None:
        """Overwrite the status unconditionally.

        Used for administrative overrides; no successor check is made.
        """
        self.status = new_status
        self.status_change_time = at.replace(microsecond=0)

    def advance(self, at: datetime) -> OrderStatus:
        """Move exactly one step forward in the delivery lifecycle."""
        successor = self.status.next
        if successor is None:
            raise ValidationError(
                f"Order {self.order_id} is already {self.status.value}"
            )
        self.set_status(successor, at)
        return successor

    def is_due(
        self,
        now: datetime,
        pending_to_shipped: timedelta,
        shipped_to_delivered: timedelta,
    ) -> bool:
        """True once the dwell time in the current status reaches its limit."""
        if self.status == OrderStatus.PENDING:
            return self.dwell_time(now) >= pending_to_shipped
        if self.status == OrderStatus.SHIPPED:
            return self.dwell_time(now) >= shipped_to_delivered
        return False

    def change_address(self, address: str) -> None:
        if not address or not address.strip():
            raise ValidationError("Shipping address is required")
        self.shipping_address = address.strip()

    # --- Computed properties --------------------------------------------------

    def dwell_time(self, now: datetime) -> timedelta:
        return now - self.status_change_time  # type: ignore[operator]

    @property
    def item_count(self) -> int:
        return sum(item.quantity.value for item in self.items)
