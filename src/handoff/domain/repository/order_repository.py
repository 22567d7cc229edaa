"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from handoff.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> str:
        """Generate a new unique order ID."""

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return a detached copy of an order, or None if not found."""

    @abstractmethod
    def save(self, order: Order, expected_version: int | None = None) -> None:
        """Persist a new or updated order as one atomic conditional write.

        New orders (``id is None``) get an ID and ``version`` 1.  For an
        existing order the write only succeeds while the stored version
        still equals *expected_version*; otherwise it raises
        ``ConcurrentUpdateError`` and stores nothing.  On success
        ``order.version`` is advanced.
        """
