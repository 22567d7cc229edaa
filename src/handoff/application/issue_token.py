"""Application service: Issue Handoff Token use case.

The seller asks for a code to show the buyer at the meetup.  Issuing a
new code supersedes any earlier one for the same order.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from handoff.application.dto import TokenDTO
from handoff.application.order_updates import update_order
from handoff.domain.model.order import Order
from handoff.domain.model.value_objects import PartyRole
from handoff.domain.repository.order_repository import OrderRepository
from handoff.domain.service.token_signer import TokenSigner

logger = logging.getLogger(__name__)


class IssueHandoffTokenHandler:

    def __init__(self, order_repo: OrderRepository, signer: TokenSigner) -> None:
        self._order_repo = order_repo
        self._signer = signer

    def handle(
        self, order_id: str, seller_id: str, now: datetime | None = None
    ) -> TokenDTO:
        now = now or datetime.now(timezone.utc)
        # only handed out once the order has recorded it
        token = self._signer.issue(order_id, seller_id, now)

        def change(order: Order) -> bool:
            order.ensure_pending()
            order.authorize(seller_id, PartyRole.SELLER)
            order.record_token_issue(token)
            return True

        update_order(self._order_repo, order_id, change)
        logger.info("Issued handoff code for order %s, expires %s", order_id, token.expires_at)
        return TokenDTO.from_token(token)
