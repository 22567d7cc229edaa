"""Domain service: Rating Gate.

A party may rate the other party of an order once, and only after the
handoff completed.  The gate checks the order-side rules; the
one-rating-per-rater rule is enforced atomically by the rating store.
The caller runs ``submit`` in a unit of work so the stored rating and the
ratee's updated summary land together.
"""

from __future__ import annotations

from datetime import datetime

from handoff.domain.exceptions import OrderNotCompletedError
from handoff.domain.model.order import Order, OrderStatus
from handoff.domain.model.rating import Rating
from handoff.domain.repository.rating_repository import RatingRepository
from handoff.domain.repository.reputation_repository import ReputationRepository


class RatingGate:

    def __init__(
        self,
        rating_repo: RatingRepository,
        reputation_repo: ReputationRepository,
    ) -> None:
        self._rating_repo = rating_repo
        self._reputation_repo = reputation_repo

    def submit(
        self,
        order: Order,
        rater_id: str,
        stars: int,
        review: str | None,
        now: datetime,
    ) -> Rating:
        """Store a rating from *rater_id* about their counterparty.

        Raises ``UnauthorizedError`` for outsiders, ``OrderNotCompletedError``
        before completion and ``DuplicateRatingError`` on a second rating.
        """
        ratee_id = order.counterparty_of(rater_id)
        if order.status != OrderStatus.COMPLETED:
            raise OrderNotCompletedError(
                f"Order {order.id} is {order.status.value}, ratings open once it is completed"
            )

        rating = Rating.create(
            order_id=order.id,  # type: ignore[arg-type]
            rater_id=rater_id,
            ratee_id=ratee_id,
            stars=stars,
            review=review,
            now=now,
        )
        self._rating_repo.add(rating)
        self._reputation_repo.modify(
            ratee_id, lambda account: account.record_rating(rating.stars.value)
        )
        return rating
