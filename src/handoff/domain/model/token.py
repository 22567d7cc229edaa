"""HandoffToken: the seller's signed "I am here for this order" credential.

A token travels as one opaque string (it is rendered into a QR code):

    base64url(canonical payload) "." hex(signature)

The canonical payload is compact JSON with sorted keys and the issuance
time as integer epoch milliseconds, so signer and verifier always agree
on the exact bytes.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from handoff.domain.exceptions import MalformedTokenError

TOKEN_TTL = timedelta(minutes=10)

_PAYLOAD_FIELDS = ("issued_at", "key_id", "order_id", "seller_id")


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)
# far enough below datetime.max that adding a lifetime cannot overflow
_LATEST = datetime(9000, 1, 1, tzinfo=timezone.utc)


def to_epoch_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        raise ValueError("Token timestamps must be timezone-aware")
    return (moment - _EPOCH) // _MILLISECOND


def from_epoch_millis(millis: int) -> datetime:
    return _EPOCH + millis * _MILLISECOND


def truncate_to_millis(moment: datetime) -> datetime:
    """Drop sub-millisecond precision so the moment survives encoding."""
    return from_epoch_millis(to_epoch_millis(moment))


@dataclass(frozen=True)
class HandoffToken:

    order_id: str
    seller_id: str
    issued_at: datetime
    key_id: str
    signature: str = ""
    ttl: timedelta = TOKEN_TTL

    @property
    def expires_at(self) -> datetime:
        return self.issued_at + self.ttl

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    # --- Wire format ----------------------------------------------------------

    def canonical_payload(self) -> bytes:
        payload = {
            "issued_at": to_epoch_millis(self.issued_at),
            "key_id": self.key_id,
            "order_id": self.order_id,
            "seller_id": self.seller_id,
        }
        return json.dumps(payload, sort_keys=True, separators=(",", ":")).encode(
            "utf-8"
        )

    def encode(self) -> str:
        if not self.signature:
            raise ValueError("Cannot encode an unsigned token")
        body = base64.urlsafe_b64encode(self.canonical_payload()).rstrip(b"=")
        return f"{body.decode('ascii')}.{self.signature}"

    @staticmethod
    def decode(raw: str, ttl: timedelta = TOKEN_TTL) -> HandoffToken:
        """Parse a token string.  Does NOT check the signature."""
        if not raw or raw.count(".") != 1:
            raise MalformedTokenError("Handoff code is not in the expected format")
        body, signature = raw.strip().split(".")
        try:
            padded = body + "=" * (-len(body) % 4)
            payload = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
        except (binascii.Error, UnicodeError, ValueError) as exc:
            raise MalformedTokenError("Handoff code payload is unreadable") from exc

        if not isinstance(payload, dict) or sorted(payload) != list(_PAYLOAD_FIELDS):
            raise MalformedTokenError("Handoff code payload has unexpected fields")
        if not isinstance(payload["issued_at"], int) or isinstance(
            payload["issued_at"], bool
        ):
            raise MalformedTokenError("Handoff code timestamp is not an integer")
        if not 0 <= payload["issued_at"] < to_epoch_millis(_LATEST):
            raise MalformedTokenError("Handoff code timestamp is out of range")
        for name in ("key_id", "order_id", "seller_id"):
            if not isinstance(payload[name], str) or not payload[name]:
                raise MalformedTokenError(f"Handoff code field '{name}' is invalid")
        if not signature:
            raise MalformedTokenError("Handoff code is missing its signature")

        return HandoffToken(
            order_id=payload["order_id"],
            seller_id=payload["seller_id"],
            issued_at=from_epoch_millis(payload["issued_at"]),
            key_id=payload["key_id"],
            signature=signature,
            ttl=ttl,
        )
