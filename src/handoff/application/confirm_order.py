"""Application service: Confirm Order use case (the confirmation coordinator).

Either party confirms the handoff, by tapping "confirm" or, for the
buyer, by presenting the seller's handoff code.  When the second
confirmation lands the order completes and both parties are rewarded.

Steps, all against one loaded version of the order:
1. The order must exist and be pending.
2. The acting user must hold the claimed role on the order.
3. A presented code must be authentic, unexpired, current and unspent;
   it is spent by this confirmation.
4. A repeated confirmation by the same party is a no-op.
5. The party's flag is set; the second flag completes the order.

The write is conditional on the loaded version, so of two concurrent
confirmations exactly one sees the completion and fires the ledger.  The
order write and the rewards share one unit of work: if paying out fails
the completion is rolled back with it and the confirmation can be retried.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from handoff.application.dto import ConfirmationDTO, OrderDTO
from handoff.application.order_updates import update_order
from handoff.domain.exceptions import ValidationError
from handoff.domain.model.order import Order, OrderStatus, TokenStage
from handoff.domain.model.token import HandoffToken
from handoff.domain.model.value_objects import PartyRole
from handoff.domain.repository.order_repository import OrderRepository
from handoff.domain.repository.unit_of_work import UnitOfWork
from handoff.domain.service.reward_ledger import RewardLedger
from handoff.domain.service.token_signer import TokenSigner

logger = logging.getLogger(__name__)


class ConfirmOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        ledger: RewardLedger,
        unit_of_work: UnitOfWork,
        signer: TokenSigner | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._ledger = ledger
        self._unit_of_work = unit_of_work
        self._signer = signer

    def handle(
        self,
        order_id: str,
        party_id: str,
        role: PartyRole,
        token: str | None = None,
        now: datetime | None = None,
    ) -> ConfirmationDTO:
        now = now or datetime.now(timezone.utc)

        def change(order: Order) -> bool:
            order.ensure_pending()
            order.authorize(party_id, role)
            token_spent = False
            if token is not None:
                self._spend_token(order, role, token, now)
                token_spent = True
            recorded = order.confirm(role, now)
            return recorded or token_spent

        with self._unit_of_work.transaction():
            order, written = update_order(self._order_repo, order_id, change)
            just_completed = written and order.status == OrderStatus.COMPLETED
            if just_completed:
                self._ledger.award(order, now)

        if written:
            logger.info("Order %s: %s confirmed the handoff", order.id, role.value)
        if just_completed:
            logger.info("Order %s completed", order.id)

        return ConfirmationDTO(order=OrderDTO.from_order(order), just_completed=just_completed)

    def _spend_token(self, order: Order, role: PartyRole, raw: str, now: datetime) -> None:
        if role is not PartyRole.BUYER:
            raise ValidationError("Only the buyer confirms with a handoff code")
        if self._signer is None:
            raise RuntimeError("ConfirmOrderHandler needs a TokenSigner to accept handoff codes")
        handoff = HandoffToken.decode(raw, self._signer.ttl)
        self._signer.verify(handoff, now)
        order.admit_token(handoff, TokenStage.CONFIRM)
