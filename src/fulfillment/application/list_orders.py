"""Application service: List Orders use case (query)."""

from __future__ import annotations

from fulfillment.application.dto import OrderDTO
from fulfillment.domain.service.order_ledger import OrderLedger


class ListOrdersHandler:

    def __init__(self, ledger: OrderLedger) -> None:
        self._ledger = ledger

    def handle(self, user_id: str | None = None) -> list[OrderDTO]:
        """All orders, or one user's orders, in the order they were placed."""
        if user_id is None:
            orders = self._ledger.list_orders()
        else:
            orders = self._ledger.orders_by_user(user_id)
        return [OrderDTO.from_domain(order) for order in orders]
