"""Application service: Show Order use case (query)."""

from __future__ import annotations

from fulfillment.application.dto import OrderDTO
from fulfillment.domain.exceptions import EntityNotFoundError
from fulfillment.domain.service.order_ledger import OrderLedger


class ShowOrderHandler:

    def __init__(self, ledger: OrderLedger) -> None:
        self._ledger = ledger

    def handle(self, order_id: str) -> OrderDTO:
        order = self._ledger.find_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} not found")
        return OrderDTO.from_domain(order)
