"""Abstract catalog/stock provider.

Defined in the domain layer so the ledger never depends on how the
catalog is stored. Items returned are live objects: ``take_stock`` on
them followed by ``save()`` makes the decrement durable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from fulfillment.domain.model.catalog import CatalogItem


class CatalogRepository(ABC):

    @abstractmethod
    def get_by_id(self, item_id: str) -> CatalogItem | None:
        """Return the item with this id, or None."""

    @abstractmethod
    def list_all(self) -> list[CatalogItem]:
        """Return every item in the catalog."""

    @abstractmethod
    def save(self) -> None:
        """Persist the whole catalog. Raises PersistenceError on failure."""
