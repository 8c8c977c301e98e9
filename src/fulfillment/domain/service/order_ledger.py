"""Domain service: Order Ledger.

Owns the order collection and coordinates the cross-aggregate work of
placing an order: checking and decrementing catalog stock, snapshotting
prices, appending the order and persisting both sides.

Three locks are involved and always taken in this order:

* ``_stock_lock`` serialises stock check-and-decrement across concurrent
  ``create_order`` calls, so two baskets cannot both pass the check for
  the last unit of an item.
* ``_persist_lock`` serialises writes. The snapshot is taken while it is
  held, so a later snapshot can never be overwritten by an earlier one.
* ``_lock`` guards the collection itself and is only held for in-memory
  access, never across file I/O.
"""

from __future__ import annotations

import dataclasses
import threading
from datetime import timedelta

import structlog

from fulfillment.domain.clock import Clock
from fulfillment.domain.exceptions import EntityNotFoundError
from fulfillment.domain.model.catalog import CatalogItem
from fulfillment.domain.model.order import (
    InsufficientStock,
    Order,
    OrderLineItem,
    OrderStatus,
    generate_order_id,
)
from fulfillment.domain.model.pricing import BasketLine
from fulfillment.domain.model.value_objects import Quantity
from fulfillment.domain.repository.catalog_repository import CatalogRepository
from fulfillment.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)


class OrderLedger:

    def __init__(
        self,
        order_repo: OrderRepository,
        catalog_repo: CatalogRepository,
        clock: Clock,
    ) -> None:
        self._order_repo = order_repo
        self._catalog_repo = catalog_repo
        self._clock = clock
        self._orders: list[Order] = []
        self._lock = threading.Lock()
        self._stock_lock = threading.Lock()
        self._persist_lock = threading.Lock()

    @property
    def clock(self) -> Clock:
        return self._clock

    def load(self) -> int:
        """Replace the in-memory collection with the persisted one."""
        orders = self._order_repo.load_all()
        with self._lock:
            self._orders = list(orders)
        logger.info("Orders loaded", count=len(orders))
        return len(orders)

    # --- Commands -------------------------------------------------------------

    def create_order(
        self,
        user_id: str,
        basket: list[BasketLine],
        shipping_address: str,
    ) -> Order | InsufficientStock:
        """Place an order for *basket*.

        Uses a two-phase approach:
          Phase 1, check: every line's quantity against the item's
                    current stock. The first shortfall is returned as an
                    ``InsufficientStock`` value; nothing has changed yet.
          Phase 2, commit: snapshot name and price per line, decrement
                    stock, append the order, then persist catalog and
                    ledger.
        """
        now = self._clock.now()

        with self._stock_lock:
            # Phase 1: resolve and check every line
            checked: list[tuple[CatalogItem, int]] = []
            # Running total per item; one item may appear on several lines.
            requested: dict[str, int] = {}
            for line in basket:
                quantity = Quantity(line.quantity).value
                item = self._catalog_repo.get_by_id(line.item.item_id)
                if item is None:
                    raise EntityNotFoundError(
                        f"Item not found: '{line.item.item_id}'"
                    )
                requested[item.item_id] = requested.get(item.item_id, 0) + quantity
                if not item.has_stock_for(requested[item.item_id]):
                    shortfall = InsufficientStock(
                        item_id=item.item_id,
                        item_name=item.name,
                        requested=requested[item.item_id],
                        available=item.stock,
                    )
                    logger.warning(
                        "Order rejected for insufficient stock",
                        user_id=user_id,
                        item_id=item.item_id,
                        requested=requested[item.item_id],
                        available=item.stock,
                    )
                    return shortfall
                checked.append((item, quantity))

            line_items = [
                OrderLineItem(
                    item_id=item.item_id,
                    item_name=item.name,
                    unit_price=item.price,  # <-- price snapshot
                    quantity=Quantity(quantity),
                )
                for item, quantity in checked
            ]
            order = Order.create(
                order_id=generate_order_id(user_id, now),
                user_id=user_id,
                items=line_items,
                shipping_address=shipping_address,
                at=now,
            )

            # Phase 2: mutate
            for item, quantity in checked:
                item.take_stock(quantity)

            with self._lock:
                order.order_id = self._unique_order_id(order.order_id)
                self._orders.append(order)

            self._catalog_repo.save()

        self.persist()
        logger.info(
            "Order created",
            order_id=order.order_id,
            user_id=order.user_id,
            lines=len(order.items),
            total=str(order.total_amount.amount),
        )
        return order

    def update_status(self, order_id: str, new_status: OrderStatus) -> bool:
        """Overwrite an order's status (administrative override).

        No successor check is made; only the scheduler enforces the
        forward-only sequence. Returns False for an unknown id.
        """
        with self._lock:
            order = self._find(order_id)
            if order is None:
                logger.warning("Status update for unknown order", order_id=order_id)
                return False
            previous = order.status
            order.set_status(new_status, self._clock.now())

        self.persist()
        logger.info(
            "Order status overridden",
            order_id=order_id,
            previous=previous.value,
            status=new_status.value,
        )
        return True

    def update_address(self, order_id: str, shipping_address: str) -> bool:
        with self._lock:
            order = self._find(order_id)
            if order is None:
                return False
            order.change_address(shipping_address)

        self.persist()
        logger.info("Order address changed", order_id=order_id)
        return True

    def advance_lifecycle(
        self,
        pending_to_shipped: timedelta,
        shipped_to_delivered: timedelta,
    ) -> int:
        """Advance every due order by exactly one step.

        Does not persist; the caller decides when to write the batch.
        Returns the number of orders that changed.
        """
        now = self._clock.now()
        changed = 0
        with self._lock:
            for order in self._orders:
                if not order.is_due(now, pending_to_shipped, shipped_to_delivered):
                    continue
                previous = order.status
                order.advance(now)
                changed += 1
                logger.debug(
                    "Order advanced",
                    order_id=order.order_id,
                    previous=previous.value,
                    status=order.status.value,
                )
        return changed

    def persist(self) -> None:
        """Write a consistent snapshot of the collection to the store."""
        with self._persist_lock:
            with self._lock:
                snapshot = [dataclasses.replace(order) for order in self._orders]
            self._order_repo.replace_all(snapshot)

    # --- Queries --------------------------------------------------------------

    def find_by_id(self, order_id: str) -> Order | None:
        with self._lock:
            return self._find(order_id)

    def orders_by_user(self, user_id: str) -> list[Order]:
        with self._lock:
            return [order for order in self._orders if order.user_id == user_id]

    def list_orders(self) -> list[Order]:
        with self._lock:
            return list(self._orders)

    # --- Internal helpers -----------------------------------------------------

    def _find(self, order_id: str) -> Order | None:
        for order in self._orders:
            if order.order_id == order_id:
                return order
        return None

    def _unique_order_id(self, candidate: str) -> str:
        """Suffix ``-2``, ``-3``... onto an id already in the ledger.

        Only happens when one user places two orders within one second.
        """
        existing = {order.order_id for order in self._orders}
        if candidate not in existing:
            return candidate
        suffix = 2
        while f"{candidate}-{suffix}" in existing:
            suffix += 1
        resolved = f"{candidate}-{suffix}"
        logger.warning("Order id collision", order_id=candidate, resolved=resolved)
        return resolved
