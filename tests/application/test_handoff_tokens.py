"""Integration tests for issuing and scanning handoff codes."""

import base64
import json
from datetime import datetime, timedelta, timezone

import pytest

from handoff.application.issue_token import IssueHandoffTokenHandler
from handoff.application.open_order import OpenOrderHandler
from handoff.application.verify_token import VerifyAndConsumeTokenHandler
from handoff.domain.exceptions import (
    InvalidSignatureError,
    MalformedTokenError,
    OrderNotFoundError,
    OrderNotPendingError,
    TokenAlreadyUsedError,
    TokenExpiredError,
    UnauthorizedError,
)
from handoff.domain.model.order import TokenState
from handoff.domain.service.token_signer import TokenSigner
from tests.fakes import FakeOrderRepository

NOW = datetime(2025, 10, 6, 12, 0, tzinfo=timezone.utc)


def _setup():
    order_repo = FakeOrderRepository()
    signer = TokenSigner({"primary": b"campus-secret"}, "primary")
    order_id = OpenOrderHandler(order_repo).handle("item-1", "seller", "buyer", "450").id
    issue = IssueHandoffTokenHandler(order_repo, signer)
    scan = VerifyAndConsumeTokenHandler(order_repo, signer)
    return order_repo, signer, issue, scan, order_id


class TestIssueHandoffToken:

    def test_issue_records_expiry_on_order(self):
        order_repo, _, issue, _, order_id = _setup()

        dto = issue.handle(order_id, "seller", now=NOW)

        assert dto.order_id == order_id
        assert dto.seller_id == "seller"
        assert dto.expires_at == (NOW + timedelta(minutes=10)).isoformat()
        order = order_repo.get_by_id(order_id)
        assert order.token_state == TokenState.ISSUED
        assert order.token_expires_at == NOW + timedelta(minutes=10)

    def test_only_seller_may_issue(self):
        _, _, issue, _, order_id = _setup()
        with pytest.raises(UnauthorizedError, match="not the seller"):
            issue.handle(order_id, "buyer", now=NOW)

    def test_unknown_order(self):
        _, _, issue, _, _ = _setup()
        with pytest.raises(OrderNotFoundError):
            issue.handle("nope", "seller", now=NOW)

    def test_closed_order_cannot_issue(self):
        order_repo, _, issue, _, order_id = _setup()
        order = order_repo.get_by_id(order_id)
        order.cancel("seller", NOW)
        order_repo.save(order)
        with pytest.raises(OrderNotPendingError):
            issue.handle(order_id, "seller", now=NOW)

    def test_reissue_invalidates_previous_code(self):
        _, _, issue, scan, order_id = _setup()
        old = issue.handle(order_id, "seller", now=NOW)
        new = issue.handle(order_id, "seller", now=NOW + timedelta(minutes=2))

        with pytest.raises(InvalidSignatureError, match="replaced"):
            scan.handle(old.token, "buyer", now=NOW + timedelta(minutes=3))
        assert scan.handle(new.token, "buyer", now=NOW + timedelta(minutes=3)).order_id == order_id

    def test_reissue_is_the_retry_path_for_a_used_code(self):
        _, _, issue, scan, order_id = _setup()
        first = issue.handle(order_id, "seller", now=NOW)
        scan.handle(first.token, "buyer", now=NOW)

        second = issue.handle(order_id, "seller", now=NOW + timedelta(minutes=1))
        assert scan.handle(second.token, "buyer", now=NOW + timedelta(minutes=1))


class TestVerifyAndConsumeToken:

    def test_scan_returns_order_and_seller(self):
        order_repo, _, issue, scan, order_id = _setup()
        token = issue.handle(order_id, "seller", now=NOW)

        result = scan.handle(token.token, "buyer", now=NOW + timedelta(minutes=1))

        assert (result.order_id, result.seller_id, result.item_id) == (order_id, "seller", "item-1")
        assert result.amount == "450.00 INR"
        assert order_repo.get_by_id(order_id).token_state == TokenState.SCANNED

    def test_second_scan_already_used(self):
        _, _, issue, scan, order_id = _setup()
        token = issue.handle(order_id, "seller", now=NOW)
        scan.handle(token.token, "buyer", now=NOW)

        with pytest.raises(TokenAlreadyUsedError):
            scan.handle(token.token, "buyer", now=NOW + timedelta(minutes=2))

    def test_late_scan_is_expired_not_invalid(self):
        _, _, issue, scan, order_id = _setup()
        token = issue.handle(order_id, "seller", now=NOW)

        with pytest.raises(TokenExpiredError):
            scan.handle(token.token, "buyer", now=NOW + timedelta(minutes=11))

    def test_expired_check_wins_over_used_check(self):
        _, _, issue, scan, order_id = _setup()
        token = issue.handle(order_id, "seller", now=NOW)
        scan.handle(token.token, "buyer", now=NOW)
        with pytest.raises(TokenExpiredError):
            scan.handle(token.token, "buyer", now=NOW + timedelta(hours=1))

    def test_only_buyer_may_scan(self):
        order_repo, _, issue, scan, order_id = _setup()
        token = issue.handle(order_id, "seller", now=NOW)

        with pytest.raises(UnauthorizedError):
            scan.handle(token.token, "mallory", now=NOW)
        assert order_repo.get_by_id(order_id).token_state == TokenState.ISSUED

    def test_tampered_code_rejected(self):
        _, _, issue, scan, order_id = _setup()
        token = issue.handle(order_id, "seller", now=NOW).token
        body, signature = token.split(".")
        tampered = f"{body}.{signature[:-1]}{'0' if signature[-1] != '0' else '1'}"

        with pytest.raises(InvalidSignatureError):
            scan.handle(tampered, "buyer", now=NOW)

    def test_code_for_deleted_order(self):
        _, signer, _, scan, _ = _setup()
        orphan = signer.issue("ghost", "seller", NOW).encode()
        with pytest.raises(OrderNotFoundError):
            scan.handle(orphan, "buyer", now=NOW)

    def test_garbled_timestamp_is_malformed(self):
        order_repo, _, _, scan, order_id = _setup()
        payload = {
            "issued_at": 10**20,
            "key_id": "primary",
            "order_id": order_id,
            "seller_id": "seller",
        }
        body = base64.urlsafe_b64encode(json.dumps(payload).encode("utf-8"))
        code = body.rstrip(b"=").decode("ascii") + ".ab"

        with pytest.raises(MalformedTokenError):
            scan.handle(code, "buyer", now=NOW)
        assert order_repo.get_by_id(order_id).token_state == TokenState.NONE
