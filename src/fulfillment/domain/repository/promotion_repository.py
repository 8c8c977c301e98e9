"""Abstract durable store for promotions."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fulfillment.domain.model.promotion import Promotion


class PromotionRepository(ABC):

    @abstractmethod
    def load_all(self) -> list[Promotion]:
        """Return every persisted promotion in file order."""

    @abstractmethod
    def replace_all(self, promotions: list[Promotion]) -> None:
        """Overwrite the store with *promotions*. Raises PersistenceError."""
