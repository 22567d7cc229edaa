"""Atomic read-modify-write for the Order aggregate.

Every handler that changes an order goes through ``update_order``: load,
apply the domain change, then save conditionally on the version that was
loaded.  If another writer got there first the change is re-run against
the fresh order, so every rule is re-checked against the state that will
actually be overwritten.  Domain errors raised by the change are never
retried.
"""

from __future__ import annotations

import logging
from typing import Callable

from handoff.domain.exceptions import ConcurrentUpdateError, OrderNotFoundError
from handoff.domain.model.order import Order
from handoff.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 5


def load_order(order_repo: OrderRepository, order_id: str) -> Order:
    order = order_repo.get_by_id(order_id)
    if order is None:
        raise OrderNotFoundError(f"Order {order_id} not found")
    return order


def update_order(
    order_repo: OrderRepository,
    order_id: str,
    change: Callable[[Order], bool],
    max_attempts: int = MAX_ATTEMPTS,
) -> tuple[Order, bool]:
    """Apply *change* to an order atomically.

    *change* mutates the order it is given and returns whether anything
    changed; when it returns False nothing is written.  Returns the
    resulting order and whether this call wrote it.
    """
    for attempt in range(1, max_attempts + 1):
        order = load_order(order_repo, order_id)
        loaded_version = order.version
        if not change(order):
            return order, False
        try:
            order_repo.save(order, expected_version=loaded_version)
        except ConcurrentUpdateError:
            logger.debug(
                "Order %s changed underneath us (attempt %d/%d), retrying",
                order_id,
                attempt,
                max_attempts,
            )
            continue
        return order, True

    raise ConcurrentUpdateError(
        f"Order {order_id} is being updated by someone else, try again"
    )
