"""Application service: Create Order use case.

Resolves the basket against the catalog and hands it to the ledger.
A stock shortfall comes back as a value, not an exception, so the
caller can report exactly which item fell short.
"""

from __future__ import annotations

from fulfillment.application.basket import resolve_basket
from fulfillment.application.dto import BasketItemSpec, OrderDTO
from fulfillment.domain.model.order import InsufficientStock
from fulfillment.domain.repository.catalog_repository import CatalogRepository
from fulfillment.domain.service.order_ledger import OrderLedger


class CreateOrderHandler:

    def __init__(self, ledger: OrderLedger, catalog_repo: CatalogRepository) -> None:
        self._ledger = ledger
        self._catalog_repo = catalog_repo

    def handle(
        self,
        user_id: str,
        item_specs: list[BasketItemSpec],
        shipping_address: str,
    ) -> OrderDTO | InsufficientStock:
        basket = resolve_basket(self._catalog_repo, item_specs)
        result = self._ledger.create_order(user_id, basket, shipping_address)
        if isinstance(result, InsufficientStock):
            return result
        return OrderDTO.from_domain(result)
