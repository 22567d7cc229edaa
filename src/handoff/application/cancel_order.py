"""Application service: Cancel Order use case.

Either participant may call off a pending order.  A cancelled order is
kept as an audit record and accepts no further confirmations.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from handoff.application.dto import OrderDTO
from handoff.application.order_updates import update_order
from handoff.domain.model.order import Order
from handoff.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class CancelOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(
        self, order_id: str, party_id: str, now: datetime | None = None
    ) -> OrderDTO:
        now = now or datetime.now(timezone.utc)

        def change(order: Order) -> bool:
            order.cancel(party_id, now)
            return True

        order, _ = update_order(self._order_repo, order_id, change)
        logger.info("Order %s cancelled by %s", order.id, party_id)
        return OrderDTO.from_order(order)
