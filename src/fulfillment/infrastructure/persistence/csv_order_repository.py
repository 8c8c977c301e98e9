"""CSV-file-backed implementation of OrderRepository.

Layout (header first, one order per line)::

    order_id,user_id,items,order_time,total_amount,shipping_address,status,status_change_time

``items`` is ``itemId:itemName:price:quantity`` entries joined by ``;``.
Times are integer epoch seconds.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path

import structlog

from fulfillment.domain.exceptions import ValidationError
from fulfillment.domain.model.order import Order, OrderLineItem, OrderStatus
from fulfillment.domain.model.value_objects import Money, Quantity
from fulfillment.domain.repository.order_repository import OrderRepository
from fulfillment.infrastructure.persistence.csv_files import (
    from_epoch,
    read_rows,
    to_epoch,
    write_rows,
)

logger = structlog.get_logger(__name__)

HEADER = [
    "order_id",
    "user_id",
    "items",
    "order_time",
    "total_amount",
    "shipping_address",
    "status",
    "status_change_time",
]


class CsvOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    # --- OrderRepository interface --------------------------------------------

    def load_all(self) -> list[Order]:
        if not self._file_path.exists():
            logger.info("Orders file not found, starting empty", path=str(self._file_path))
            return []

        orders: list[Order] = []
        for row in read_rows(self._file_path):
            if len(row) < len(HEADER):
                logger.warning("Skipping short order row", row=row)
                continue
            try:
                orders.append(self._to_domain(row))
            except (ValueError, InvalidOperation, ValidationError) as exc:
                logger.warning("Skipping unreadable order row", order_id=row[0], error=str(exc))
        return orders

    def replace_all(self, orders: list[Order]) -> None:
        write_rows(self._file_path, HEADER, [self._to_row(order) for order in orders])

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_row(order: Order) -> list[str]:
        return [
            order.order_id,
            order.user_id,
            format_items(order.items),
            to_epoch(order.order_time),
            str(order.total_amount.amount),
            order.shipping_address,
            order.status.value,
            to_epoch(order.status_change_time),  # type: ignore[arg-type]
        ]

    @staticmethod
    def _to_domain(row: list[str]) -> Order:
        return Order(
            order_id=row[0],
            user_id=row[1],
            items=parse_items(row[2]),
            order_time=from_epoch(row[3]),
            total_amount=Money(Decimal(row[4])),
            shipping_address=row[5],
            status=OrderStatus.from_label(row[6]),
            status_change_time=from_epoch(row[7]),
        )


def format_items(items: list[OrderLineItem]) -> str:
    return ";".join(
        f"{item.item_id}:{item.item_name}:{item.unit_price.amount}:{item.quantity.value}"
        for item in items
    )


def parse_items(raw: str) -> list[OrderLineItem]:
    """Parse the ``items`` column; malformed entries are skipped."""
    items: list[OrderLineItem] = []
    for entry in raw.split(";"):
        entry = entry.strip()
        if not entry:
            continue
        parts = entry.split(":")
        if len(parts) < 4:
            logger.warning("Skipping malformed order item", entry=entry)
            continue
        # Names may themselves contain ':'; id is first, price and qty last.
        item_id, price, quantity = parts[0], parts[-2], parts[-1]
        name = ":".join(parts[1:-2])
        try:
            items.append(
                OrderLineItem(
                    item_id=item_id,
                    item_name=name,
                    unit_price=Money(Decimal(price)),
                    quantity=Quantity(int(quantity)),
                )
            )
        except (ValueError, InvalidOperation, ValidationError):
            logger.warning("Skipping malformed order item", entry=entry)
    return items
