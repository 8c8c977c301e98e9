"""Domain service: Promotion Engine.

Owns the promotion collection and answers every pricing question:
the best discount for an item, the full-reductions currently in force,
and the priced summary of a basket.

Every mutation validates first, then changes the collection, then
persists the whole collection.
"""

from __future__ import annotations

import dataclasses
import re
from datetime import datetime
from decimal import Decimal

import structlog

from fulfillment.domain.clock import Clock
from fulfillment.domain.exceptions import (
    EntityNotFoundError,
    InvalidPromotionFieldError,
    ValidationError,
)
from fulfillment.domain.model.pricing import (
    BasketLine,
    ItemDiscount,
    PricedBasketResult,
)
from fulfillment.domain.model.promotion import Promotion, PromotionType
from fulfillment.domain.model.value_objects import Money, Quantity
from fulfillment.domain.repository.promotion_repository import PromotionRepository

logger = structlog.get_logger(__name__)

_PROMOTION_ID = re.compile(r"^PROMO(\d+)$")


class PromotionEngine:

    def __init__(self, promotion_repo: PromotionRepository, clock: Clock) -> None:
        self._promotion_repo = promotion_repo
        self._clock = clock
        self._promotions: dict[str, Promotion] = {}

    def load(self) -> int:
        """Replace the in-memory collection with the persisted one."""
        self._promotions = {}
        for promotion in self._promotion_repo.load_all():
            if promotion.promotion_id in self._promotions:
                logger.warning(
                    "Duplicate promotion id skipped",
                    promotion_id=promotion.promotion_id,
                )
                continue
            self._promotions[promotion.promotion_id] = promotion
        logger.info("Promotions loaded", count=len(self._promotions))
        return len(self._promotions)

    # --- Queries --------------------------------------------------------------

    def find_by_id(self, promotion_id: str) -> Promotion | None:
        return self._promotions.get(promotion_id)

    def list_all(self) -> list[Promotion]:
        return list(self._promotions.values())

    def active_promotions(self) -> list[Promotion]:
        """Every promotion currently in force, of either kind."""
        now = self._clock.now()
        return [p for p in self._promotions.values() if p.is_valid(now)]

    def generate_promotion_id(self) -> str:
        """Next id in the ``PROMO001`` sequence."""
        highest = 0
        for promotion_id in self._promotions:
            match = _PROMOTION_ID.match(promotion_id)
            if match:
                highest = max(highest, int(match.group(1)))
        return f"PROMO{highest + 1:03d}"

    def best_discount_for(self, item_id: str) -> Promotion | None:
        """The valid discount with the lowest rate for *item_id*.

        Ties keep the first promotion encountered.
        """
        now = self._clock.now()
        best: Promotion | None = None
        best_rate = Decimal("1")
        for promotion in self._promotions.values():
            if not (promotion.is_discount and promotion.is_valid(now)):
                continue
            if not promotion.applies_to(item_id):
                continue
            if promotion.discount_rate < best_rate:  # type: ignore[operator]
                best_rate = promotion.discount_rate  # type: ignore[assignment]
                best = promotion
        return best

    def active_full_reductions(self) -> list[Promotion]:
        """Valid full-reductions, lowest threshold first."""
        now = self._clock.now()
        reductions = [
            p
            for p in self._promotions.values()
            if p.is_full_reduction and p.is_valid(now)
        ]
        return sorted(reductions, key=lambda p: p.threshold.amount)  # type: ignore[union-attr]

    def price_basket(self, lines: list[BasketLine]) -> PricedBasketResult:
        """Price a basket against the promotions in force right now.

        Discounts are applied per line first. Every qualifying
        full-reduction is then measured against the same post-discount
        total and the reductions are added together, so tiers stack
        instead of cascading over a shrinking balance.
        """
        original_total = Money.zero()
        after_discount_total = Money.zero()
        item_discounts: list[ItemDiscount] = []
        applied: list[str] = []

        for line in lines:
            quantity = Quantity(line.quantity).value
            item = line.item
            original = item.price * quantity
            original_total = original_total + original

            discount = self.best_discount_for(item.item_id)
            if discount is None:
                after_discount_total = after_discount_total + original
                continue

            discounted = discount.price_for(item.price) * quantity
            after_discount_total = after_discount_total + discounted
            item_discounts.append(ItemDiscount(item.name, original - discounted))
            applied.append(f"{item.name} {discount.display_tag()}")

        total_reduction = Money.zero()
        for promotion in self.active_full_reductions():
            reduction = promotion.reduction_for(after_discount_total)
            if not reduction.is_zero:
                total_reduction = total_reduction + reduction
                applied.append(promotion.display_tag())

        # Stacked tiers can outgrow the subtotal; the final price floors at zero.
        final_total = after_discount_total.less(total_reduction)

        return PricedBasketResult(
            original_total=original_total,
            after_discount_total=after_discount_total,
            total_reduction=total_reduction,
            final_total=final_total,
            total_savings=original_total - final_total,
            item_discounts=item_discounts,
            applied_promotions=applied,
        )

    # --- Commands -------------------------------------------------------------

    def add_promotion(self, promotion: Promotion) -> Promotion:
        if not promotion.promotion_id or not promotion.promotion_id.strip():
            raise ValidationError("Promotion id is required")
        if promotion.promotion_id in self._promotions:
            raise ValidationError(
                f"Promotion '{promotion.promotion_id}' already exists"
            )
        self._validate(promotion)

        self._promotions[promotion.promotion_id] = promotion
        self._persist()
        logger.info(
            "Promotion added",
            promotion_id=promotion.promotion_id,
            kind=promotion.kind.value,
            tag=promotion.display_tag(),
        )
        return promotion

    def delete_promotion(self, promotion_id: str) -> None:
        self._require(promotion_id)
        del self._promotions[promotion_id]
        self._persist()
        logger.info("Promotion deleted", promotion_id=promotion_id)

    def update_name(self, promotion_id: str, name: str) -> Promotion:
        self._require(promotion_id)
        if not name or not name.strip():
            raise InvalidPromotionFieldError("Promotion name is required")
        return self._replace(promotion_id, name=name.strip())

    def update_window(
        self, promotion_id: str, start_time: datetime, end_time: datetime
    ) -> Promotion:
        self._require(promotion_id)
        _check_window(start_time, end_time)
        return self._replace(promotion_id, start_time=start_time, end_time=end_time)

    def update_discount_rate(self, promotion_id: str, rate: Decimal) -> Promotion:
        promotion = self._require(promotion_id)
        _require_kind(promotion, PromotionType.DISCOUNT)
        _check_rate(rate)
        return self._replace(promotion_id, discount_rate=rate)

    def update_target_item(self, promotion_id: str, item_id: str) -> Promotion:
        promotion = self._require(promotion_id)
        _require_kind(promotion, PromotionType.DISCOUNT)
        if not item_id or not item_id.strip():
            raise InvalidPromotionFieldError("Target item id is required")
        return self._replace(promotion_id, target_item_id=item_id.strip())

    def update_threshold(self, promotion_id: str, threshold: Money) -> Promotion:
        promotion = self._require(promotion_id)
        _require_kind(promotion, PromotionType.FULL_REDUCTION)
        _check_amounts(threshold, promotion.reduction)  # type: ignore[arg-type]
        return self._replace(promotion_id, threshold=threshold)

    def update_reduction(self, promotion_id: str, reduction: Money) -> Promotion:
        promotion = self._require(promotion_id)
        _require_kind(promotion, PromotionType.FULL_REDUCTION)
        _check_amounts(promotion.threshold, reduction)  # type: ignore[arg-type]
        return self._replace(promotion_id, reduction=reduction)

    def set_active(self, promotion_id: str, is_active: bool) -> Promotion:
        self._require(promotion_id)
        return self._replace(promotion_id, is_active=is_active)

    # --- Internal helpers -----------------------------------------------------

    def _require(self, promotion_id: str) -> Promotion:
        promotion = self._promotions.get(promotion_id)
        if promotion is None:
            raise EntityNotFoundError(f"Promotion '{promotion_id}' not found")
        return promotion

    def _replace(self, promotion_id: str, **changes) -> Promotion:
        updated = dataclasses.replace(self._promotions[promotion_id], **changes)
        self._promotions[promotion_id] = updated
        self._persist()
        logger.info(
            "Promotion updated",
            promotion_id=promotion_id,
            fields=sorted(changes),
        )
        return updated

    def _persist(self) -> None:
        self._promotion_repo.replace_all(list(self._promotions.values()))

    @staticmethod
    def _validate(promotion: Promotion) -> None:
        _check_window(promotion.start_time, promotion.end_time)
        if promotion.is_discount:
            if promotion.discount_rate is None:
                raise InvalidPromotionFieldError("Discount rate is required")
            _check_rate(promotion.discount_rate)
        else:
            if promotion.threshold is None or promotion.reduction is None:
                raise InvalidPromotionFieldError(
                    "Threshold and reduction amounts are required"
                )
            _check_amounts(promotion.threshold, promotion.reduction)


def _require_kind(promotion: Promotion, kind: PromotionType) -> None:
    if promotion.kind != kind:
        raise InvalidPromotionFieldError(
            f"Promotion '{promotion.promotion_id}' is a "
            f"{promotion.kind.value} promotion, not {kind.value}"
        )


def _check_rate(rate: Decimal) -> None:
    # NaN would make the range comparison raise InvalidOperation
    if not rate.is_finite() or not Decimal("0") < rate < Decimal("1"):
        raise InvalidPromotionFieldError(
            f"Discount rate must be between 0 and 1, got {rate}"
        )


def _check_amounts(threshold: Money, reduction: Money) -> None:
    if threshold.is_zero:
        raise InvalidPromotionFieldError("Threshold amount must be greater than zero")
    if reduction.is_zero:
        raise InvalidPromotionFieldError("Reduction amount must be greater than zero")
    if reduction >= threshold:
        raise InvalidPromotionFieldError(
            f"Reduction {reduction} must be less than threshold {threshold}"
        )


def _check_window(start_time: datetime, end_time: datetime) -> None:
    if end_time <= start_time:
        raise InvalidPromotionFieldError("End time must be later than start time")
