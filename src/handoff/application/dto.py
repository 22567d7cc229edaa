"""Data Transfer Objects returned by the use-case handlers.

Timestamps are ISO strings and enums their values, so the CLI (or any
other caller) can render them without importing the domain model.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from handoff.domain.model.deal import DealRecord
from handoff.domain.model.order import Order
from handoff.domain.model.rating import Rating
from handoff.domain.model.reputation import ReputationAccount
from handoff.domain.model.token import HandoffToken


def _ts(moment: datetime | None) -> str | None:
    return moment.isoformat() if moment is not None else None


@dataclass(frozen=True)
class OrderDTO:

    id: str
    item_id: str
    seller_id: str
    buyer_id: str
    amount: str  # formatted, e.g. "450.00 INR"
    status: str
    seller_confirmed: bool
    seller_confirmed_at: str | None
    buyer_confirmed: bool
    buyer_confirmed_at: str | None
    completed_at: str | None
    dispute_raised_by: str | None
    dispute_reason: str | None
    dispute_status: str | None
    token_state: str
    token_expires_at: str | None
    created_at: str

    @staticmethod
    def from_order(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id,  # type: ignore[arg-type]
            item_id=order.item_id,
            seller_id=order.seller_id,
            buyer_id=order.buyer_id,
            amount=str(order.amount),
            status=order.status.value,
            seller_confirmed=order.seller_confirmed,
            seller_confirmed_at=_ts(order.seller_confirmed_at),
            buyer_confirmed=order.buyer_confirmed,
            buyer_confirmed_at=_ts(order.buyer_confirmed_at),
            completed_at=_ts(order.completed_at),
            dispute_raised_by=order.dispute_raised_by,
            dispute_reason=order.dispute_reason,
            dispute_status=order.dispute_status,
            token_state=order.token_state.value,
            token_expires_at=_ts(order.token_expires_at),
            created_at=order.created_at.isoformat(),
        )


@dataclass(frozen=True)
class ConfirmationDTO:
    """Output of a confirmation: the order after it, and whether it completed it."""

    order: OrderDTO
    just_completed: bool


@dataclass(frozen=True)
class TokenDTO:
    """Output: a freshly issued handoff code, ready to render as a QR code."""

    token: str
    order_id: str
    seller_id: str
    issued_at: str
    expires_at: str

    @staticmethod
    def from_token(token: HandoffToken) -> TokenDTO:
        return TokenDTO(
            token=token.encode(),
            order_id=token.order_id,
            seller_id=token.seller_id,
            issued_at=token.issued_at.isoformat(),
            expires_at=token.expires_at.isoformat(),
        )


@dataclass(frozen=True)
class ScanResultDTO:
    """Output of a successful scan, shown to the buyer before they confirm."""

    order_id: str
    seller_id: str
    item_id: str
    amount: str


@dataclass(frozen=True)
class RatingDTO:

    order_id: str
    rater_id: str
    ratee_id: str
    stars: int
    review: str | None
    created_at: str

    @staticmethod
    def from_rating(rating: Rating) -> RatingDTO:
        return RatingDTO(
            order_id=rating.order_id,
            rater_id=rating.rater_id,
            ratee_id=rating.ratee_id,
            stars=rating.stars.value,
            review=rating.review,
            created_at=rating.created_at.isoformat(),
        )


@dataclass(frozen=True)
class DealDTO:

    order_id: str
    item_id: str
    role: str
    counterparty_id: str
    amount: str
    points: int
    completed_at: str


@dataclass(frozen=True)
class AccountDTO:

    user_id: str
    campus_points: int
    deals_completed: int
    trusted_seller: bool
    average_rating: str
    total_ratings: int
    deals: list[DealDTO]

    @staticmethod
    def from_account(account: ReputationAccount, deals: list[DealRecord]) -> AccountDTO:
        return AccountDTO(
            user_id=account.user_id,
            campus_points=account.campus_points,
            deals_completed=account.deals_completed,
            trusted_seller=account.trusted_seller,
            average_rating=str(account.average_rating),
            total_ratings=account.total_ratings,
            deals=[_deal_for(account.user_id, deal) for deal in deals],
        )


def _deal_for(user_id: str, deal: DealRecord) -> DealDTO:
    as_seller = deal.seller_id == user_id
    return DealDTO(
        order_id=deal.order_id,
        item_id=deal.item_id,
        role="seller" if as_seller else "buyer",
        counterparty_id=deal.buyer_id if as_seller else deal.seller_id,
        amount=str(deal.amount),
        points=deal.seller_points if as_seller else deal.buyer_points,
        completed_at=deal.completed_at.isoformat(),
    )
