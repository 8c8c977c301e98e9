"""Turn basket specs from the outside world into domain basket lines."""

from __future__ import annotations

from fulfillment.application.dto import BasketItemSpec
from fulfillment.domain.exceptions import EntityNotFoundError, ValidationError
from fulfillment.domain.model.pricing import BasketLine
from fulfillment.domain.repository.catalog_repository import CatalogRepository


def resolve_basket(
    catalog_repo: CatalogRepository, specs: list[BasketItemSpec]
) -> list[BasketLine]:
    if not specs:
        raise ValidationError("Basket must contain at least one item")

    lines: list[BasketLine] = []
    for spec in specs:
        item = catalog_repo.get_by_id(spec.item_id)
        if item is None:
            raise EntityNotFoundError(f"Item not found: '{spec.item_id}'")
        lines.append(BasketLine(item=item, quantity=spec.quantity))
    return lines
