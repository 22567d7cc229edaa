"""JSON-file-backed implementation of RatingRepository."""

from __future__ import annotations

from datetime import datetime

from handoff.domain.exceptions import DuplicateRatingError
from handoff.domain.model.rating import Rating
from handoff.domain.model.value_objects import Stars
from handoff.domain.repository.rating_repository import RatingRepository
from handoff.infrastructure.persistence.json_store import JsonStore


class JsonRatingRepository(RatingRepository):

    def __init__(self, store: JsonStore) -> None:
        self._store = store

    def add(self, rating: Rating) -> None:
        with self._store.edit("ratings") as records:
            for raw in records:
                if raw["order_id"] == rating.order_id and raw["rater_id"] == rating.rater_id:
                    raise DuplicateRatingError("You have already rated this order")
            records.append(self._to_raw(rating))

    def find(self, order_id: str, rater_id: str) -> Rating | None:
        for raw in self._store.load("ratings"):
            if raw["order_id"] == order_id and raw["rater_id"] == rater_id:
                return self._to_domain(raw)
        return None

    def list_for_ratee(self, user_id: str) -> list[Rating]:
        return [
            self._to_domain(raw)
            for raw in self._store.load("ratings")
            if raw["ratee_id"] == user_id
        ]

    @staticmethod
    def _to_raw(rating: Rating) -> dict:
        return {
            "order_id": rating.order_id,
            "rater_id": rating.rater_id,
            "ratee_id": rating.ratee_id,
            "stars": rating.stars.value,
            "review": rating.review,
            "created_at": rating.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Rating:
        return Rating(
            order_id=raw["order_id"],
            rater_id=raw["rater_id"],
            ratee_id=raw["ratee_id"],
            stars=Stars(raw["stars"]),
            review=raw.get("review"),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
