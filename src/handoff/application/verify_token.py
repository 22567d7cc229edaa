"""Application service: Verify And Consume Token use case.

The buyer scans the seller's code.  The code is checked on its own first
(signature, then expiry) because it is what names the order; then it is
checked against the order and marked as scanned.  A second scan of the
same code is rejected.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from handoff.application.dto import ScanResultDTO
from handoff.application.order_updates import update_order
from handoff.domain.model.order import Order, TokenStage
from handoff.domain.model.token import HandoffToken
from handoff.domain.model.value_objects import PartyRole
from handoff.domain.repository.order_repository import OrderRepository
from handoff.domain.service.token_signer import TokenSigner

logger = logging.getLogger(__name__)


class VerifyAndConsumeTokenHandler:

    def __init__(self, order_repo: OrderRepository, signer: TokenSigner) -> None:
        self._order_repo = order_repo
        self._signer = signer

    def handle(
        self, token: str, buyer_id: str, now: datetime | None = None
    ) -> ScanResultDTO:
        now = now or datetime.now(timezone.utc)
        handoff = HandoffToken.decode(token, self._signer.ttl)
        self._signer.verify(handoff, now)

        def change(order: Order) -> bool:
            order.ensure_pending()
            order.authorize(buyer_id, PartyRole.BUYER)
            order.admit_token(handoff, TokenStage.SCAN)
            return True

        order, _ = update_order(self._order_repo, handoff.order_id, change)
        logger.info("Handoff code for order %s scanned by buyer", order.id)
        return ScanResultDTO(
            order_id=order.id,  # type: ignore[arg-type]
            seller_id=order.seller_id,
            item_id=order.item_id,
            amount=str(order.amount),
        )
