"""Application service: Add Promotion use case.

Builds a discount or full-reduction from raw CLI input, assigns the next
``PROMOnnn`` id and lets the engine validate and persist it.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation

from fulfillment.application.dto import PromotionDTO
from fulfillment.domain.exceptions import InvalidPromotionFieldError, ValidationError
from fulfillment.domain.model.promotion import ALL_ITEMS, Promotion
from fulfillment.domain.model.value_objects import Money
from fulfillment.domain.service.promotion_engine import PromotionEngine


def parse_rate(raw: str) -> Decimal:
    try:
        rate = Decimal(raw.strip())
    except InvalidOperation as exc:
        raise InvalidPromotionFieldError(f"Invalid discount rate: {raw!r}") from exc
    if not rate.is_finite():
        raise InvalidPromotionFieldError(f"Invalid discount rate: {raw!r}")
    return rate


class AddPromotionHandler:

    def __init__(self, engine: PromotionEngine) -> None:
        self._engine = engine

    def add_discount(
        self,
        name: str,
        rate: str,
        start_time: datetime,
        end_time: datetime,
        target_item_id: str = ALL_ITEMS,
    ) -> PromotionDTO:
        promotion = Promotion.discount(
            promotion_id=self._engine.generate_promotion_id(),
            name=_require_name(name),
            rate=parse_rate(rate),
            start_time=start_time,
            end_time=end_time,
            target_item_id=target_item_id,
        )
        return self._add(promotion)

    def add_full_reduction(
        self,
        name: str,
        threshold: str,
        reduction: str,
        start_time: datetime,
        end_time: datetime,
    ) -> PromotionDTO:
        promotion = Promotion.full_reduction(
            promotion_id=self._engine.generate_promotion_id(),
            name=_require_name(name),
            threshold=Money.of(threshold),
            reduction=Money.of(reduction),
            start_time=start_time,
            end_time=end_time,
        )
        return self._add(promotion)

    def _add(self, promotion: Promotion) -> PromotionDTO:
        self._engine.add_promotion(promotion)
        in_force = promotion.promotion_id in {
            p.promotion_id for p in self._engine.active_promotions()
        }
        return PromotionDTO.from_domain(promotion, in_force=in_force)


def _require_name(name: str) -> str:
    if not name or not name.strip():
        raise ValidationError("Promotion name is required")
    return name.strip()
