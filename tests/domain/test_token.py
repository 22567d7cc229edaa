"""Unit tests for the handoff token wire format."""

import base64
import json
from datetime import datetime, timedelta, timezone

import pytest

from handoff.domain.exceptions import MalformedTokenError
from handoff.domain.model.token import (
    HandoffToken,
    from_epoch_millis,
    to_epoch_millis,
    truncate_to_millis,
)

ISSUED = datetime(2025, 10, 6, 12, 0, 0, 123000, tzinfo=timezone.utc)


def _token(**overrides) -> HandoffToken:
    fields = dict(
        order_id="O1",
        seller_id="seller",
        issued_at=ISSUED,
        key_id="primary",
        signature="cafe",
    )
    fields.update(overrides)
    return HandoffToken(**fields)


def _encode_payload(payload: dict) -> str:
    raw = json.dumps(payload).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


class TestCanonicalPayload:

    def test_fixed_field_order_and_format(self):
        assert _token().canonical_payload() == (
            b'{"issued_at":1759752000123,"key_id":"primary",'
            b'"order_id":"O1","seller_id":"seller"}'
        )

    def test_signature_is_not_part_of_payload(self):
        assert _token(signature="aa").canonical_payload() == _token(
            signature="bb"
        ).canonical_payload()


class TestEpochMillis:

    def test_exact_conversion(self):
        assert to_epoch_millis(ISSUED) == 1759752000123
        assert from_epoch_millis(1759752000123) == ISSUED

    def test_truncation_drops_microseconds(self):
        moment = ISSUED.replace(microsecond=123456)
        assert truncate_to_millis(moment) == ISSUED

    def test_naive_datetime_rejected(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            to_epoch_millis(datetime(2025, 1, 1))


class TestEncodeDecode:

    def test_decoded_token_matches_original(self):
        token = _token()
        decoded = HandoffToken.decode(token.encode())
        assert decoded == token

    def test_expiry_is_ten_minutes_after_issue(self):
        assert _token().expires_at == ISSUED + timedelta(minutes=10)

    def test_is_expired_is_strict(self):
        token = _token()
        assert not token.is_expired(token.expires_at)
        assert token.is_expired(token.expires_at + timedelta(milliseconds=1))

    def test_unsigned_token_cannot_be_encoded(self):
        with pytest.raises(ValueError, match="unsigned"):
            _token(signature="").encode()

    @pytest.mark.parametrize(
        "raw",
        ["", "no-dot-here", "a.b.c", "!!!.cafe", _encode_payload({"order_id": "O1"}) + ".cafe"],
    )
    def test_malformed_strings_rejected(self, raw):
        with pytest.raises(MalformedTokenError):
            HandoffToken.decode(raw)

    def test_missing_signature_rejected(self):
        body = _token().encode().split(".")[0]
        with pytest.raises(MalformedTokenError, match="signature"):
            HandoffToken.decode(body + ".")

    def test_non_integer_timestamp_rejected(self):
        payload = {
            "issued_at": "2025-10-06T12:00:00Z",
            "key_id": "primary",
            "order_id": "O1",
            "seller_id": "seller",
        }
        with pytest.raises(MalformedTokenError, match="timestamp"):
            HandoffToken.decode(_encode_payload(payload) + ".cafe")

    @pytest.mark.parametrize("issued_at", [10**20, -1, 2**63])
    def test_out_of_range_timestamp_rejected(self, issued_at):
        payload = {
            "issued_at": issued_at,
            "key_id": "primary",
            "order_id": "O1",
            "seller_id": "seller",
        }
        with pytest.raises(MalformedTokenError, match="out of range"):
            HandoffToken.decode(_encode_payload(payload) + ".ab")

    def test_empty_field_rejected(self):
        payload = {"issued_at": 1, "key_id": "primary", "order_id": "", "seller_id": "s"}
        with pytest.raises(MalformedTokenError, match="order_id"):
            HandoffToken.decode(_encode_payload(payload) + ".cafe")
