"""Abstract durable store for the order collection."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fulfillment.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def load_all(self) -> list[Order]:
        """Return every persisted order in file order."""

    @abstractmethod
    def replace_all(self, orders: list[Order]) -> None:
        """Overwrite the store with *orders*. Raises PersistenceError."""
