"""Application service: Show Order use case (query)."""

from __future__ import annotations

from handoff.application.dto import OrderDTO
from handoff.application.order_updates import load_order
from handoff.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, viewer_id: str) -> OrderDTO:
        order = load_order(self._order_repo, order_id)
        order.role_of(viewer_id)  # only participants may look
        return OrderDTO.from_order(order)
