"""Application service: administrative order edits.

Status overrides may jump or reverse the lifecycle; the automatic
scheduler is the only component that insists on forward steps.
"""

from __future__ import annotations

from fulfillment.domain.exceptions import EntityNotFoundError
from fulfillment.domain.model.order import OrderStatus
from fulfillment.domain.service.order_ledger import OrderLedger


class UpdateOrderHandler:

    def __init__(self, ledger: OrderLedger) -> None:
        self._ledger = ledger

    def set_status(self, order_id: str, status_label: str) -> OrderStatus:
        status = OrderStatus.from_label(status_label)
        if not self._ledger.update_status(order_id, status):
            raise EntityNotFoundError(f"Order {order_id} not found")
        return status

    def change_address(self, order_id: str, shipping_address: str) -> None:
        if not self._ledger.update_address(order_id, shipping_address):
            raise EntityNotFoundError(f"Order {order_id} not found")
