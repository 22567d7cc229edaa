"""Rating: one party's score for the other party of a completed order."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from handoff.domain.exceptions import ValidationError
from handoff.domain.model.value_objects import Stars

MAX_REVIEW_LENGTH = 500


@dataclass(frozen=True)
class Rating:
    """Unique per ``(order_id, rater_id)``; the rating store enforces it."""

    order_id: str
    rater_id: str
    ratee_id: str
    stars: Stars
    review: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        order_id: str,
        rater_id: str,
        ratee_id: str,
        stars: int,
        review: str | None,
        now: datetime,
    ) -> Rating:
        text = (review or "").strip() or None
        if text is not None and len(text) > MAX_REVIEW_LENGTH:
            raise ValidationError(
                f"Review is too long ({len(text)} characters, max {MAX_REVIEW_LENGTH})"
            )
        return Rating(
            order_id=order_id,
            rater_id=rater_id,
            ratee_id=ratee_id,
            stars=Stars(stars),
            review=text,
            created_at=now,
        )
