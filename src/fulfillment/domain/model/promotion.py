"""Promotion value: one discount or one full-reduction rule.

Promotions are frozen; the PromotionEngine edits them by replacing the
whole value. Range checks (rate in (0,1), reduction below threshold,
window ordering) live in the engine, not here, so persisted rules can be
loaded exactly as written.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from fulfillment.domain.model.value_objects import Money

ALL_ITEMS = "-1"


class PromotionType(Enum):
    DISCOUNT = "DISCOUNT"
    FULL_REDUCTION = "FULL_REDUCTION"


@dataclass(frozen=True)
class Promotion:
    """A discount (``rate`` on one or all items) or a full-reduction
    (``reduction`` off the subtotal once it reaches ``threshold``).

    Kind-specific fields that do not apply are ``None``.
    """

    promotion_id: str
    name: str
    kind: PromotionType
    is_active: bool
    start_time: datetime
    end_time: datetime
    target_item_id: str | None = None
    discount_rate: Decimal | None = None
    threshold: Money | None = None
    reduction: Money | None = None

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def discount(
        promotion_id: str,
        name: str,
        rate: Decimal,
        start_time: datetime,
        end_time: datetime,
        target_item_id: str = ALL_ITEMS,
        is_active: bool = True,
    ) -> Promotion:
        return Promotion(
            promotion_id=promotion_id,
            name=name,
            kind=PromotionType.DISCOUNT,
            is_active=is_active,
            start_time=start_time,
            end_time=end_time,
            target_item_id=target_item_id or ALL_ITEMS,
            discount_rate=rate,
        )

    @staticmethod
    def full_reduction(
        promotion_id: str,
        name: str,
        threshold: Money,
        reduction: Money,
        start_time: datetime,
        end_time: datetime,
        is_active: bool = True,
    ) -> Promotion:
        return Promotion(
            promotion_id=promotion_id,
            name=name,
            kind=PromotionType.FULL_REDUCTION,
            is_active=is_active,
            start_time=start_time,
            end_time=end_time,
            threshold=threshold,
            reduction=reduction,
        )

    # --- Queries --------------------------------------------------------------

    @property
    def is_discount(self) -> bool:
        return self.kind == PromotionType.DISCOUNT

    @property
    def is_full_reduction(self) -> bool:
        return self.kind == PromotionType.FULL_REDUCTION

    def is_valid(self, now: datetime) -> bool:
        """Active and inside the inclusive validity window."""
        return self.is_active and self.start_time <= now <= self.end_time

    def applies_to(self, item_id: str) -> bool:
        if not self.is_discount:
            return False
        return self.target_item_id == ALL_ITEMS or self.target_item_id == item_id

    def price_for(self, unit_price: Money) -> Money:
        """Discounted unit price; full-reductions leave the price alone."""
        if not self.is_discount:
            return unit_price
        return unit_price * self.discount_rate  # type: ignore[operator]

    def reduction_for(self, subtotal: Money) -> Money:
        """Amount taken off *subtotal*, or zero if the threshold is not met."""
        if not self.is_full_reduction:
            return Money.zero()
        if subtotal >= self.threshold:  # type: ignore[operator]
            return self.reduction  # type: ignore[return-value]
        return Money.zero()

    def display_tag(self) -> str:
        """Short label: ``8折`` for a 0.8 discount, ``满300减50`` for a
        full-reduction. Values are truncated, never rounded."""
        if self.is_discount:
            return f"{int(self.discount_rate * 10)}折"  # type: ignore[operator]
        return f"满{int(self.threshold.amount)}减{int(self.reduction.amount)}"  # type: ignore[union-attr]
