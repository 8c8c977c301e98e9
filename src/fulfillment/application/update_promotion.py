"""Application service: field-level promotion edits and deletion.

Raw CLI strings are converted here; the engine checks that each field
fits the promotion's kind and range.
"""

from __future__ import annotations

from datetime import datetime

from fulfillment.application.add_promotion import parse_rate
from fulfillment.application.dto import PromotionDTO
from fulfillment.domain.model.promotion import Promotion
from fulfillment.domain.model.value_objects import Money
from fulfillment.domain.service.promotion_engine import PromotionEngine


class UpdatePromotionHandler:

    def __init__(self, engine: PromotionEngine) -> None:
        self._engine = engine

    def rename(self, promotion_id: str, name: str) -> PromotionDTO:
        return self._dto(self._engine.update_name(promotion_id, name))

    def set_window(
        self, promotion_id: str, start_time: datetime, end_time: datetime
    ) -> PromotionDTO:
        return self._dto(self._engine.update_window(promotion_id, start_time, end_time))

    def set_rate(self, promotion_id: str, rate: str) -> PromotionDTO:
        return self._dto(self._engine.update_discount_rate(promotion_id, parse_rate(rate)))

    def set_target(self, promotion_id: str, item_id: str) -> PromotionDTO:
        return self._dto(self._engine.update_target_item(promotion_id, item_id))

    def set_threshold(self, promotion_id: str, threshold: str) -> PromotionDTO:
        return self._dto(self._engine.update_threshold(promotion_id, Money.of(threshold)))

    def set_reduction(self, promotion_id: str, reduction: str) -> PromotionDTO:
        return self._dto(self._engine.update_reduction(promotion_id, Money.of(reduction)))

    def set_active(self, promotion_id: str, is_active: bool) -> PromotionDTO:
        return self._dto(self._engine.set_active(promotion_id, is_active))

    def delete(self, promotion_id: str) -> None:
        self._engine.delete_promotion(promotion_id)

    def _dto(self, promotion: Promotion) -> PromotionDTO:
        in_force = promotion.promotion_id in {
            p.promotion_id for p in self._engine.active_promotions()
        }
        return PromotionDTO.from_domain(promotion, in_force=in_force)
