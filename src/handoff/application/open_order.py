"""Application service: Open Order use case.

Records that a buyer and a seller agreed on a deal; the order then waits
for both of them to confirm the handoff.
"""

from __future__ import annotations

import logging

from handoff.application.dto import OrderDTO
from handoff.domain.model.order import Order
from handoff.domain.model.value_objects import Money
from handoff.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class OpenOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(
        self,
        item_id: str,
        seller_id: str,
        buyer_id: str,
        amount: str | int | float,
    ) -> OrderDTO:
        order = Order.open(
            item_id=item_id,
            seller_id=seller_id,
            buyer_id=buyer_id,
            amount=Money.of(amount),
        )
        self._order_repo.save(order)
        logger.info("Opened order %s for item %s", order.id, order.item_id)
        return OrderDTO.from_order(order)
