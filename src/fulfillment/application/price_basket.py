"""Application service: Price Basket use case (query).

Previews what a basket would cost under the promotions in force now.
Nothing is reserved or persisted.
"""

from __future__ import annotations

from fulfillment.application.basket import resolve_basket
from fulfillment.application.dto import BasketItemSpec, PricedBasketDTO
from fulfillment.domain.repository.catalog_repository import CatalogRepository
from fulfillment.domain.service.promotion_engine import PromotionEngine


class PriceBasketHandler:

    def __init__(self, engine: PromotionEngine, catalog_repo: CatalogRepository) -> None:
        self._engine = engine
        self._catalog_repo = catalog_repo

    def handle(self, item_specs: list[BasketItemSpec]) -> PricedBasketDTO:
        basket = resolve_basket(self._catalog_repo, item_specs)
        return PricedBasketDTO.from_domain(self._engine.price_basket(basket))
