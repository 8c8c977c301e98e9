"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from fulfillment.domain.model.order import Order
from fulfillment.domain.model.pricing import PricedBasketResult
from fulfillment.domain.model.promotion import ALL_ITEMS, Promotion

_TIME_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


def format_time(moment: datetime) -> str:
    return moment.strftime(_TIME_FORMAT)


@dataclass(frozen=True)
class BasketItemSpec:
    """Input: what the customer asked for (item id + quantity)."""

    item_id: str
    quantity: int


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    item_id: str
    item_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "¥15.00"
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    order_id: str
    user_id: str
    status: str
    items: list[OrderLineItemDTO]
    total: str
    shipping_address: str
    order_time: str
    status_changed_at: str

    @staticmethod
    def from_domain(order: Order) -> OrderDTO:
        return OrderDTO(
            order_id=order.order_id,
            user_id=order.user_id,
            status=order.status.value,
            items=[
                OrderLineItemDTO(
                    item_id=item.item_id,
                    item_name=item.item_name,
                    quantity=item.quantity.value,
                    unit_price=str(item.unit_price),
                    line_total=str(item.line_total),
                )
                for item in order.items
            ],
            total=str(order.total_amount),
            shipping_address=order.shipping_address,
            order_time=format_time(order.order_time),
            status_changed_at=format_time(order.status_change_time),  # type: ignore[arg-type]
        )


@dataclass(frozen=True)
class PricedBasketDTO:
    """Output: a basket preview with every saving spelled out."""

    original_total: str
    after_discount_total: str
    total_reduction: str
    final_total: str
    total_savings: str
    item_discounts: list[tuple[str, str]]
    applied_promotions: list[str]

    @staticmethod
    def from_domain(result: PricedBasketResult) -> PricedBasketDTO:
        return PricedBasketDTO(
            original_total=str(result.original_total),
            after_discount_total=str(result.after_discount_total),
            total_reduction=str(result.total_reduction),
            final_total=str(result.final_total),
            total_savings=str(result.total_savings),
            item_discounts=[(d.item_name, str(d.savings)) for d in result.item_discounts],
            applied_promotions=list(result.applied_promotions),
        )


@dataclass(frozen=True)
class PromotionDTO:
    """Output: one promotion row for listings."""

    promotion_id: str
    name: str
    kind: str
    tag: str
    is_active: bool
    in_force: bool
    target: str
    start_time: str
    end_time: str

    @staticmethod
    def from_domain(promotion: Promotion, in_force: bool) -> PromotionDTO:
        if promotion.is_discount:
            target = (
                "all items"
                if promotion.target_item_id == ALL_ITEMS
                else f"item {promotion.target_item_id}"
            )
        else:
            target = "order subtotal"
        return PromotionDTO(
            promotion_id=promotion.promotion_id,
            name=promotion.name,
            kind=promotion.kind.value,
            tag=promotion.display_tag(),
            is_active=promotion.is_active,
            in_force=in_force,
            target=target,
            start_time=format_time(promotion.start_time),
            end_time=format_time(promotion.end_time),
        )
