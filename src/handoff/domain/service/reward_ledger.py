"""Domain service: Reward Ledger.

Credits both participants of a freshly completed order.  The ledger keeps
no record of which orders it has paid out: it is reachable only from the
single transition that completes an order, and that transition is won by
exactly one caller (see ``ConfirmOrderHandler``), inside the same unit of
work as that transition.
"""

from __future__ import annotations

import logging
from datetime import datetime

from handoff.domain.exceptions import ValidationError
from handoff.domain.model.deal import DealRecord
from handoff.domain.model.order import Order, OrderStatus
from handoff.domain.repository.deal_repository import DealRepository
from handoff.domain.repository.reputation_repository import ReputationRepository

logger = logging.getLogger(__name__)

SELLER_POINTS = 10
BUYER_POINTS = 3
TRUSTED_SELLER_DEALS = 7


class RewardLedger:

    def __init__(
        self,
        reputation_repo: ReputationRepository,
        deal_repo: DealRepository,
        seller_points: int = SELLER_POINTS,
        buyer_points: int = BUYER_POINTS,
        trusted_seller_deals: int = TRUSTED_SELLER_DEALS,
    ) -> None:
        self._reputation_repo = reputation_repo
        self._deal_repo = deal_repo
        self._seller_points = seller_points
        self._buyer_points = buyer_points
        self._trusted_seller_deals = trusted_seller_deals

    def award(self, order: Order, now: datetime) -> DealRecord:
        """Credit seller and buyer for *order* and append it to the deal history."""
        if order.status != OrderStatus.COMPLETED:
            raise ValidationError(f"Cannot reward order {order.id} in {order.status.value} status")

        self._reputation_repo.modify(
            order.seller_id,
            lambda account: account.credit_deal(
                self._seller_points, self._trusted_seller_deals
            ),
        )
        self._reputation_repo.modify(
            order.buyer_id,
            lambda account: account.credit_deal(self._buyer_points),
        )

        record = DealRecord(
            order_id=order.id,  # type: ignore[arg-type]
            item_id=order.item_id,
            seller_id=order.seller_id,
            buyer_id=order.buyer_id,
            amount=order.amount,
            seller_points=self._seller_points,
            buyer_points=self._buyer_points,
            completed_at=order.completed_at or now,
        )
        self._deal_repo.add(record)

        logger.info(
            "Rewarded order %s: seller %s +%d, buyer %s +%d",
            order.id,
            order.seller_id,
            self._seller_points,
            order.buyer_id,
            self._buyer_points,
        )
        return record
