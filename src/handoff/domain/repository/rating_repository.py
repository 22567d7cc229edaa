"""Abstract repository for Rating."""

from __future__ import annotations

from abc import ABC, abstractmethod

from handoff.domain.model.rating import Rating


class RatingRepository(ABC):

    @abstractmethod
    def add(self, rating: Rating) -> None:
        """Insert a rating.

        Raises ``DuplicateRatingError`` if the rater already rated the
        order; the check and the insert are one atomic step.
        """

    @abstractmethod
    def find(self, order_id: str, rater_id: str) -> Rating | None:
        """Return the rating *rater_id* gave on *order_id*, if any."""

    @abstractmethod
    def list_for_ratee(self, user_id: str) -> list[Rating]:
        """Return every rating received by *user_id*."""
