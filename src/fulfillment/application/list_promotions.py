"""Application service: List Promotions use case (query)."""

from __future__ import annotations

from fulfillment.application.dto import PromotionDTO
from fulfillment.domain.service.promotion_engine import PromotionEngine


class ListPromotionsHandler:

    def __init__(self, engine: PromotionEngine) -> None:
        self._engine = engine

    def handle(self, in_force_only: bool = False) -> list[PromotionDTO]:
        in_force = {p.promotion_id for p in self._engine.active_promotions()}
        promotions = self._engine.list_all()
        if in_force_only:
            promotions = [p for p in promotions if p.promotion_id in in_force]
        return [
            PromotionDTO.from_domain(p, in_force=p.promotion_id in in_force)
            for p in promotions
        ]
