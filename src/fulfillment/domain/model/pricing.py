"""Basket and priced-basket values.

A PricedBasketResult is derived on every request and never stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fulfillment.domain.model.catalog import CatalogItem
from fulfillment.domain.model.value_objects import Money


@dataclass(frozen=True)
class BasketLine:
    """One (catalog item, desired quantity) pair."""

    item: CatalogItem
    quantity: int


@dataclass(frozen=True)
class ItemDiscount:
    item_name: str
    savings: Money


@dataclass(frozen=True)
class PricedBasketResult:
    original_total: Money
    after_discount_total: Money
    total_reduction: Money
    final_total: Money
    total_savings: Money
    item_discounts: list[ItemDiscount] = field(default_factory=list)
    applied_promotions: list[str] = field(default_factory=list)
