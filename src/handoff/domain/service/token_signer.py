"""Domain service: Token Signer.

Issues and checks handoff tokens with HMAC-SHA256 over the token's
canonical payload.  The signer is a pure function of (payload, key ring,
clock): it holds no per-token state.  Whether a token has already been
spent is recorded on the Order, not here.

Keys are identified by a key id embedded in every token, so a secret can
be rotated by adding a new active key while keeping the old one for
verification until its tokens have expired.
"""

from __future__ import annotations

import hashlib
import hmac
from datetime import datetime, timedelta

from handoff.domain.exceptions import InvalidSignatureError, TokenExpiredError
from handoff.domain.model.token import TOKEN_TTL, HandoffToken, truncate_to_millis


class TokenSigner:

    def __init__(
        self,
        keys: dict[str, bytes],
        active_key_id: str,
        ttl: timedelta = TOKEN_TTL,
    ) -> None:
        if active_key_id not in keys:
            raise ValueError(f"Active signing key '{active_key_id}' is not in the key ring")
        if any(not secret for secret in keys.values()):
            raise ValueError("Signing keys must not be empty")
        self._keys = dict(keys)
        self._active_key_id = active_key_id
        self._ttl = ttl

    def __repr__(self) -> str:
        # never expose secrets through logs or tracebacks
        return f"TokenSigner(active_key_id={self._active_key_id!r}, keys={sorted(self._keys)!r})"

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, order_id: str, seller_id: str, now: datetime) -> HandoffToken:
        """Sign a fresh token for *order_id*.

        The caller has already checked that *seller_id* is the order's
        seller and that the order is pending.
        """
        unsigned = HandoffToken(
            order_id=order_id,
            seller_id=seller_id,
            issued_at=truncate_to_millis(now),
            key_id=self._active_key_id,
            ttl=self._ttl,
        )
        signature = self._sign(self._keys[self._active_key_id], unsigned)
        return HandoffToken(
            order_id=unsigned.order_id,
            seller_id=unsigned.seller_id,
            issued_at=unsigned.issued_at,
            key_id=unsigned.key_id,
            signature=signature,
            ttl=self._ttl,
        )

    def verify(self, token: HandoffToken, now: datetime) -> HandoffToken:
        """Check signature and expiry, in that order.

        An authentic token past its expiry therefore always reports
        ``TokenExpiredError``, never a signature failure.
        """
        secret = self._keys.get(token.key_id)
        if secret is None:
            raise InvalidSignatureError("Handoff code was signed with an unknown key")

        expected = self._sign(secret, token)
        if not hmac.compare_digest(expected, token.signature):
            raise InvalidSignatureError("Handoff code signature is invalid")

        # expiry follows this signer's policy, not whatever ttl the caller decoded with
        if now > token.issued_at + self._ttl:
            raise TokenExpiredError(
                "Handoff code has expired, ask the seller to generate a new one"
            )
        return token

    @staticmethod
    def _sign(secret: bytes, token: HandoffToken) -> str:
        return hmac.new(secret, token.canonical_payload(), hashlib.sha256).hexdigest()
