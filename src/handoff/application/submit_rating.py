"""Application service: Submit Rating use case."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from handoff.application.dto import RatingDTO
from handoff.application.order_updates import load_order
from handoff.domain.repository.order_repository import OrderRepository
from handoff.domain.repository.unit_of_work import UnitOfWork
from handoff.domain.service.rating_gate import RatingGate

logger = logging.getLogger(__name__)


class SubmitRatingHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        gate: RatingGate,
        unit_of_work: UnitOfWork,
    ) -> None:
        self._order_repo = order_repo
        self._gate = gate
        self._unit_of_work = unit_of_work

    def handle(
        self,
        order_id: str,
        rater_id: str,
        stars: int,
        review: str | None = None,
        now: datetime | None = None,
    ) -> RatingDTO:
        now = now or datetime.now(timezone.utc)
        order = load_order(self._order_repo, order_id)
        with self._unit_of_work.transaction():
            rating = self._gate.submit(order, rater_id, stars, review, now)
        logger.info("Order %s rated %d by %s", order_id, rating.stars.value, rater_id)
        return RatingDTO.from_rating(rating)
