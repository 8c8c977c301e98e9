"""CatalogItem: the catalog/stock provider's view of a sellable item.

Items live independently of orders. Their price and stock change over
time; orders snapshot what they need at creation.
"""

from __future__ import annotations

from dataclasses import dataclass

from fulfillment.domain.exceptions import ValidationError
from fulfillment.domain.model.value_objects import Money


@dataclass
class CatalogItem:
    """A sellable item with its current price and stock level.

    Invariant: ``stock`` is never negative.
    """

    item_id: str
    name: str
    price: Money
    stock: int
    category: str = ""
    description: str = ""

    def has_stock_for(self, quantity: int) -> bool:
        return quantity <= self.stock

    def take_stock(self, quantity: int) -> None:
        """Decrement stock for a purchase.

        Raises ValidationError if *quantity* exceeds the current stock;
        callers are expected to have checked ``has_stock_for`` first.
        """
        if quantity <= 0:
            raise ValidationError("Stock decrement must be positive")
        if quantity > self.stock:
            raise ValidationError(
                f"Insufficient stock for {self.name} "
                f"(need {quantity}, have {self.stock})"
            )
        self.stock -= quantity
