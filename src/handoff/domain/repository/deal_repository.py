"""Abstract repository for completed-deal history."""

from __future__ import annotations

from abc import ABC, abstractmethod

from handoff.domain.model.deal import DealRecord


class DealRepository(ABC):

    @abstractmethod
    def add(self, record: DealRecord) -> None:
        """Append a completed deal."""

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[DealRecord]:
        """Return deals where *user_id* was buyer or seller, oldest first."""
