"""End-to-end handoff scenarios: code issue, scan, dual confirmation."""

from datetime import datetime, timedelta, timezone

import pytest

from handoff.application.confirm_order import ConfirmOrderHandler
from handoff.application.issue_token import IssueHandoffTokenHandler
from handoff.application.open_order import OpenOrderHandler
from handoff.application.verify_token import VerifyAndConsumeTokenHandler
from handoff.domain.exceptions import TokenExpiredError
from handoff.domain.model.value_objects import PartyRole
from handoff.domain.service.reward_ledger import RewardLedger
from handoff.domain.service.token_signer import TokenSigner
from tests.fakes import (
    FakeDealRepository,
    FakeOrderRepository,
    FakeReputationRepository,
    FakeUnitOfWork,
)

NOW = datetime(2025, 10, 6, 12, 0, tzinfo=timezone.utc)


def _setup():
    order_repo = FakeOrderRepository()
    reputation_repo = FakeReputationRepository()
    deal_repo = FakeDealRepository()
    unit_of_work = FakeUnitOfWork(order_repo, reputation_repo, deal_repo)
    signer = TokenSigner({"primary": b"campus-secret"}, "primary")
    order_id = OpenOrderHandler(order_repo).handle("item-1", "S", "B", "450").id
    handlers = (
        IssueHandoffTokenHandler(order_repo, signer),
        VerifyAndConsumeTokenHandler(order_repo, signer),
        ConfirmOrderHandler(
            order_repo, RewardLedger(reputation_repo, deal_repo), unit_of_work, signer
        ),
    )
    return order_id, reputation_repo, handlers


class TestHandoffScenarios:

    def test_scan_then_dual_confirmation(self):
        order_id, reputation_repo, (issue, scan, confirm) = _setup()

        t1 = issue.handle(order_id, "S", now=NOW)
        assert t1.expires_at == (NOW + timedelta(minutes=10)).isoformat()

        scanned = scan.handle(t1.token, "B", now=NOW + timedelta(minutes=1))
        assert (scanned.order_id, scanned.seller_id) == (order_id, "S")

        buyer = confirm.handle(
            order_id, "B", PartyRole.BUYER, token=t1.token, now=NOW + timedelta(minutes=2)
        )
        assert buyer.just_completed is False

        seller = confirm.handle(order_id, "S", PartyRole.SELLER, now=NOW + timedelta(minutes=3))
        assert seller.just_completed is True
        assert seller.order.status == "completed"
        assert reputation_repo.get("S").campus_points == 10
        assert reputation_repo.get("B").campus_points == 3

    def test_late_scan_expires(self):
        order_id, _, (issue, scan, _) = _setup()
        t1 = issue.handle(order_id, "S", now=NOW)

        with pytest.raises(TokenExpiredError):
            scan.handle(t1.token, "B", now=NOW + timedelta(minutes=11))
