"""CSV-file-backed catalog/stock provider.

Layout: ``item_id,item_name,category,price,description,stock``.

The whole catalog is held in memory after the first read; ``get_by_id``
hands out the live objects, so a stock decrement followed by ``save()``
is all that is needed to make it durable.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path

import structlog

from fulfillment.domain.exceptions import ValidationError
from fulfillment.domain.model.catalog import CatalogItem
from fulfillment.domain.model.value_objects import Money
from fulfillment.domain.repository.catalog_repository import CatalogRepository
from fulfillment.infrastructure.persistence.csv_files import read_rows, write_rows

logger = structlog.get_logger(__name__)

HEADER = ["item_id", "item_name", "category", "price", "description", "stock"]


class CsvCatalogRepository(CatalogRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._items: dict[str, CatalogItem] | None = None

    # --- CatalogRepository interface ------------------------------------------

    def get_by_id(self, item_id: str) -> CatalogItem | None:
        return self._loaded().get(item_id)

    def list_all(self) -> list[CatalogItem]:
        return list(self._loaded().values())

    def save(self) -> None:
        rows = [self._to_row(item) for item in self._loaded().values()]
        write_rows(self._file_path, HEADER, rows)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_row(item: CatalogItem) -> list[str]:
        return [
            item.item_id,
            item.name,
            item.category,
            str(item.price.amount),
            item.description,
            str(item.stock),
        ]

    @staticmethod
    def _to_domain(row: list[str]) -> CatalogItem:
        return CatalogItem(
            item_id=row[0],
            name=row[1],
            category=row[2],
            price=Money(Decimal(row[3])),
            description=row[4],
            stock=int(row[5]),
        )

    # --- File helpers ---------------------------------------------------------

    def _loaded(self) -> dict[str, CatalogItem]:
        if self._items is None:
            self._items = {}
            for row in read_rows(self._file_path):
                if len(row) < len(HEADER):
                    logger.warning("Skipping short item row", row=row)
                    continue
                try:
                    item = self._to_domain(row)
                except (ValueError, InvalidOperation, ValidationError) as exc:
                    logger.warning("Skipping unreadable item row", item_id=row[0], error=str(exc))
                    continue
                self._items[item.item_id] = item
            logger.info("Catalog loaded", count=len(self._items))
        return self._items
