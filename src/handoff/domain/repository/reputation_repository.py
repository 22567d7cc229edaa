"""Abstract repository for ReputationAccount aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from handoff.domain.model.reputation import ReputationAccount


class ReputationRepository(ABC):

    @abstractmethod
    def get(self, user_id: str) -> ReputationAccount:
        """Return a user's account; users without history get a zero account."""

    @abstractmethod
    def modify(
        self, user_id: str, change: Callable[[ReputationAccount], None]
    ) -> ReputationAccount:
        """Apply *change* to the stored account atomically and return it."""
