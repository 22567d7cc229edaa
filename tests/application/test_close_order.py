"""Integration tests for cancelling, disputing and viewing orders."""

from datetime import datetime, timezone

import pytest

from handoff.application.cancel_order import CancelOrderHandler
from handoff.application.confirm_order import ConfirmOrderHandler
from handoff.application.open_order import OpenOrderHandler
from handoff.application.raise_dispute import RaiseDisputeHandler
from handoff.application.show_order import ShowOrderHandler
from handoff.domain.exceptions import (
    OrderNotFoundError,
    OrderNotPendingError,
    UnauthorizedError,
    ValidationError,
)
from handoff.domain.model.value_objects import PartyRole
from handoff.domain.service.reward_ledger import RewardLedger
from tests.fakes import (
    FakeDealRepository,
    FakeOrderRepository,
    FakeReputationRepository,
    FakeUnitOfWork,
)

NOW = datetime(2025, 10, 6, 12, 0, tzinfo=timezone.utc)


def _setup():
    order_repo = FakeOrderRepository()
    order_id = OpenOrderHandler(order_repo).handle("item-1", "seller", "buyer", "450").id
    return order_repo, order_id


def _confirm_handler(order_repo):
    reputation_repo = FakeReputationRepository()
    deal_repo = FakeDealRepository()
    return ConfirmOrderHandler(
        order_repo,
        RewardLedger(reputation_repo, deal_repo),
        FakeUnitOfWork(order_repo, reputation_repo, deal_repo),
    )


class TestOpenOrder:

    def test_open_assigns_id_and_pending_status(self):
        order_repo = FakeOrderRepository()
        dto = OpenOrderHandler(order_repo).handle("item-1", "seller", "buyer", "450")
        assert dto.id == "O1"
        assert dto.status == "pending"
        assert order_repo.get_by_id("O1").version == 1

    def test_self_purchase_rejected(self):
        with pytest.raises(ValidationError, match="same person"):
            OpenOrderHandler(FakeOrderRepository()).handle("item-1", "amy", "amy", "1")


class TestShowOrder:

    def test_participant_sees_order(self):
        order_repo, order_id = _setup()
        dto = ShowOrderHandler(order_repo).handle(order_id, viewer_id="buyer")
        assert dto.amount == "450.00 INR"
        assert dto.token_state == "none"

    def test_outsider_cannot_see_order(self):
        order_repo, order_id = _setup()
        with pytest.raises(UnauthorizedError):
            ShowOrderHandler(order_repo).handle(order_id, viewer_id="mallory")

    def test_missing_order(self):
        with pytest.raises(OrderNotFoundError):
            ShowOrderHandler(FakeOrderRepository()).handle("nope", viewer_id="buyer")


class TestCancelOrder:

    def test_cancel_pending(self):
        order_repo, order_id = _setup()
        dto = CancelOrderHandler(order_repo).handle(order_id, "seller", now=NOW)
        assert dto.status == "cancelled"
        assert order_repo.get_by_id(order_id).cancelled_by == "seller"

    def test_cancel_twice_rejected(self):
        order_repo, order_id = _setup()
        handler = CancelOrderHandler(order_repo)
        handler.handle(order_id, "seller", now=NOW)
        with pytest.raises(OrderNotPendingError):
            handler.handle(order_id, "buyer", now=NOW)

    def test_completed_order_cannot_be_cancelled(self):
        order_repo, order_id = _setup()
        confirm = _confirm_handler(order_repo)
        confirm.handle(order_id, "seller", PartyRole.SELLER, now=NOW)
        confirm.handle(order_id, "buyer", PartyRole.BUYER, now=NOW)

        with pytest.raises(OrderNotPendingError, match="completed"):
            CancelOrderHandler(order_repo).handle(order_id, "buyer", now=NOW)


class TestRaiseDispute:

    def test_dispute_freezes_order(self):
        order_repo, order_id = _setup()
        dto = RaiseDisputeHandler(order_repo).handle(order_id, "buyer", "Seller never showed up")

        assert dto.status == "disputed"
        assert dto.dispute_raised_by == "buyer"
        assert dto.dispute_status == "open"

        confirm = _confirm_handler(order_repo)
        with pytest.raises(OrderNotPendingError, match="disputed"):
            confirm.handle(order_id, "seller", PartyRole.SELLER, now=NOW)

    def test_outsider_cannot_dispute(self):
        order_repo, order_id = _setup()
        with pytest.raises(UnauthorizedError):
            RaiseDisputeHandler(order_repo).handle(order_id, "mallory", "spam")
        assert order_repo.get_by_id(order_id).dispute_status is None
