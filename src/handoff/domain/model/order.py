"""Order aggregate: one agreed sale awaiting in-person handoff.

The Order is the aggregate root of the handoff flow.  It owns the
per-party confirmation flags, the dispute fields and the state of the
handoff token currently issued for it.  All transition rules live here;
atomicity is the repository's job (see ``OrderRepository.save``).

Lifecycle::

    pending ──► completed   (both parties confirmed)
       │──────► cancelled
       └──────► disputed    (resolved by moderators, outside this system)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from handoff.domain.exceptions import (
    InvalidSignatureError,
    OrderNotPendingError,
    TokenAlreadyUsedError,
    TokenSupersededError,
    UnauthorizedError,
    ValidationError,
)
from handoff.domain.model.token import HandoffToken
from handoff.domain.model.value_objects import Money, PartyRole


class OrderStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    DISPUTED = "disputed"


class TokenState(Enum):
    """Where the order's current handoff token is in its life."""

    NONE = "none"
    ISSUED = "issued"
    SCANNED = "scanned"  # buyer verified it, not yet spent on a confirmation
    USED = "used"


class TokenStage(Enum):
    """What a presented token is being spent on."""

    SCAN = "scan"
    CONFIRM = "confirm"


DISPUTE_OPEN = "open"


@dataclass
class Order:
    """Aggregate root for handoff orders.

    Use ``Order.open()`` for new orders.  The ``__init__`` is intentionally
    simple so the repository can reconstitute persisted orders without
    re-validating.

    Invariant: ``status == COMPLETED`` if and only if both confirmation
    flags are set.
    """

    id: str | None
    item_id: str
    seller_id: str
    buyer_id: str
    amount: Money
    status: OrderStatus = OrderStatus.PENDING
    seller_confirmed: bool = False
    seller_confirmed_at: datetime | None = None
    buyer_confirmed: bool = False
    buyer_confirmed_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_by: str | None = None
    cancelled_at: datetime | None = None
    dispute_raised_by: str | None = None
    dispute_reason: str | None = None
    dispute_status: str | None = None
    token_issued_at: datetime | None = None
    token_expires_at: datetime | None = None
    token_state: TokenState = TokenState.NONE
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 0  # bumped by the repository on every successful save

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def open(item_id: str, seller_id: str, buyer_id: str, amount: Money) -> Order:
        """Open a pending order once buyer and seller have agreed a deal."""
        for label, value in (
            ("Item", item_id),
            ("Seller", seller_id),
            ("Buyer", buyer_id),
        ):
            if not value or not value.strip():
                raise ValidationError(f"{label} id is required")

        if buyer_id.strip() == seller_id.strip():
            raise ValidationError("Buyer and seller cannot be the same person")

        return Order(
            id=None,
            item_id=item_id.strip(),
            seller_id=seller_id.strip(),
            buyer_id=buyer_id.strip(),
            amount=amount,
        )

    # --- Parties --------------------------------------------------------------

    def party_id(self, role: PartyRole) -> str:
        return self.seller_id if role is PartyRole.SELLER else self.buyer_id

    def authorize(self, party_id: str, role: PartyRole) -> None:
        """Check that *party_id* really is this order's *role*."""
        if party_id != self.party_id(role):
            raise UnauthorizedError(
                f"User '{party_id}' is not the {role.value} of order {self.id}"
            )

    def role_of(self, party_id: str) -> PartyRole:
        """Resolve a participant's role, rejecting outsiders."""
        if party_id == self.seller_id:
            return PartyRole.SELLER
        if party_id == self.buyer_id:
            return PartyRole.BUYER
        raise UnauthorizedError(
            f"User '{party_id}' is not a participant of order {self.id}"
        )

    def counterparty_of(self, party_id: str) -> str:
        return self.party_id(self.role_of(party_id).other)

    # --- State queries --------------------------------------------------------

    @property
    def is_pending(self) -> bool:
        return self.status == OrderStatus.PENDING

    @property
    def is_fully_confirmed(self) -> bool:
        return self.seller_confirmed and self.buyer_confirmed

    def has_confirmed(self, role: PartyRole) -> bool:
        if role is PartyRole.SELLER:
            return self.seller_confirmed
        return self.buyer_confirmed

    def ensure_pending(self) -> None:
        if self.status != OrderStatus.PENDING:
            raise OrderNotPendingError(
                f"Order {self.id} is {self.status.value}, expected pending"
            )

    # --- Handoff token --------------------------------------------------------

    def record_token_issue(self, token: HandoffToken) -> None:
        """Remember the newest token; any earlier one is superseded."""
        self.ensure_pending()
        if token.order_id != self.id or token.seller_id != self.seller_id:
            raise ValidationError("Token was not issued for this order's seller")
        self.token_issued_at = token.issued_at
        self.token_expires_at = token.expires_at
        self.token_state = TokenState.ISSUED

    def admit_token(self, token: HandoffToken, stage: TokenStage) -> None:
        """Spend an authentic, unexpired token on a scan or a confirmation.

        The signature and expiry must already have been checked by the
        ``TokenSigner``; this only checks the token against the order's
        stored token state.
        """
        if token.order_id != self.id or token.seller_id != self.seller_id:
            raise InvalidSignatureError("Handoff code does not belong to this order")
        if self.token_issued_at is None or token.issued_at != self.token_issued_at:
            raise TokenSupersededError(
                "Handoff code was replaced by a newer one, scan the latest code"
            )

        if self.token_state == TokenState.USED:
            raise TokenAlreadyUsedError("Handoff code has already been used")
        if stage is TokenStage.SCAN and self.token_state == TokenState.SCANNED:
            raise TokenAlreadyUsedError("Handoff code has already been scanned")

        self.token_state = (
            TokenState.SCANNED if stage is TokenStage.SCAN else TokenState.USED
        )

    # --- State transitions ----------------------------------------------------

    def confirm(self, role: PartyRole, now: datetime) -> bool:
        """Record *role*'s confirmation of the handoff.

        Returns False (and changes nothing) when that party has already
        confirmed.  When this confirmation is the second one the order
        moves to COMPLETED in the same step, so the flags and the status
        can never be observed out of step with each other.
        """
        self.ensure_pending()
        if self.has_confirmed(role):
            return False

        if role is PartyRole.SELLER:
            self.seller_confirmed = True
            self.seller_confirmed_at = now
        else:
            self.buyer_confirmed = True
            self.buyer_confirmed_at = now

        if self.is_fully_confirmed:
            self.status = OrderStatus.COMPLETED
            self.completed_at = now
        return True

    def cancel(self, party_id: str, now: datetime) -> None:
        """Transition PENDING -> CANCELLED at a participant's request."""
        self.ensure_pending()
        self.role_of(party_id)
        self.status = OrderStatus.CANCELLED
        self.cancelled_by = party_id
        self.cancelled_at = now

    def raise_dispute(self, party_id: str, reason: str) -> None:
        """Transition PENDING -> DISPUTED.

        Resolution belongs to human moderators; nothing in this system
        moves an order out of DISPUTED.
        """
        self.ensure_pending()
        self.role_of(party_id)
        if not reason or not reason.strip():
            raise ValidationError("A dispute needs a reason")
        self.status = OrderStatus.DISPUTED
        self.dispute_raised_by = party_id
        self.dispute_reason = reason.strip()
        self.dispute_status = DISPUTE_OPEN
