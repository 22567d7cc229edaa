"""Application service: Raise Dispute use case.

Parks a pending order for moderator review.  Nothing here resolves a
dispute; the order simply stops accepting confirmations.
"""

from __future__ import annotations

import logging

from handoff.application.dto import OrderDTO
from handoff.application.order_updates import update_order
from handoff.domain.model.order import Order
from handoff.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class RaiseDisputeHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, party_id: str, reason: str) -> OrderDTO:

        def change(order: Order) -> bool:
            order.raise_dispute(party_id, reason)
            return True

        order, _ = update_order(self._order_repo, order_id, change)
        logger.info("Dispute raised on order %s by %s", order.id, party_id)
        return OrderDTO.from_order(order)
