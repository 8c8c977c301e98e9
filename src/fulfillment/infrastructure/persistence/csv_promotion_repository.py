"""CSV-file-backed implementation of PromotionRepository.

Every row has exactly ten fields. Fields that do not apply to a
promotion's kind are written empty.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path

import structlog

from fulfillment.domain.exceptions import ValidationError
from fulfillment.domain.model.promotion import ALL_ITEMS, Promotion, PromotionType
from fulfillment.domain.model.value_objects import Money
from fulfillment.domain.repository.promotion_repository import PromotionRepository
from fulfillment.infrastructure.persistence.csv_files import (
    from_epoch,
    read_rows,
    to_epoch,
    write_rows,
)

logger = structlog.get_logger(__name__)

HEADER = [
    "promotion_id",
    "promotion_name",
    "promotion_type",
    "is_active",
    "start_time",
    "end_time",
    "target_item_id",
    "discount_rate",
    "threshold_amount",
    "reduction_amount",
]

_TRUE = {"1", "true", "yes"}


class CsvPromotionRepository(PromotionRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    # --- PromotionRepository interface ----------------------------------------

    def load_all(self) -> list[Promotion]:
        if not self._file_path.exists():
            logger.info("Promotions file not found, starting empty", path=str(self._file_path))
            return []

        promotions: list[Promotion] = []
        for row in read_rows(self._file_path):
            if len(row) < len(HEADER):
                logger.warning("Skipping short promotion row", row=row)
                continue
            try:
                promotions.append(self._to_domain(row))
            except (ValueError, InvalidOperation, ValidationError) as exc:
                logger.warning(
                    "Skipping unreadable promotion row",
                    promotion_id=row[0],
                    error=str(exc),
                )
        return promotions

    def replace_all(self, promotions: list[Promotion]) -> None:
        write_rows(self._file_path, HEADER, [self._to_row(p) for p in promotions])

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_row(promotion: Promotion) -> list[str]:
        common = [
            promotion.promotion_id,
            promotion.name,
            promotion.kind.value,
            "1" if promotion.is_active else "0",
            to_epoch(promotion.start_time),
            to_epoch(promotion.end_time),
        ]
        if promotion.is_discount:
            return common + [
                promotion.target_item_id or ALL_ITEMS,
                str(promotion.discount_rate),
                "",
                "",
            ]
        return common + [
            "",
            "",
            str(promotion.threshold.amount),  # type: ignore[union-attr]
            str(promotion.reduction.amount),  # type: ignore[union-attr]
        ]

    @staticmethod
    def _to_domain(row: list[str]) -> Promotion:
        try:
            kind = PromotionType(row[2].upper())
        except ValueError:
            raise ValidationError(f"Unknown promotion type: {row[2]!r}") from None

        is_active = row[3].lower() in _TRUE
        start_time = from_epoch(row[4])
        end_time = from_epoch(row[5])

        if kind == PromotionType.DISCOUNT:
            rate = Decimal(row[7])
            if not rate.is_finite():
                raise ValidationError(f"Invalid discount rate: {row[7]!r}")
            return Promotion.discount(
                promotion_id=row[0],
                name=row[1],
                rate=rate,
                start_time=start_time,
                end_time=end_time,
                target_item_id=row[6] or ALL_ITEMS,
                is_active=is_active,
            )
        return Promotion.full_reduction(
            promotion_id=row[0],
            name=row[1],
            threshold=Money(Decimal(row[8])),
            reduction=Money(Decimal(row[9])),
            start_time=start_time,
            end_time=end_time,
            is_active=is_active,
        )
