"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  One ``Container`` is
built per process and passed down explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass

from handoff.domain.service.rating_gate import RatingGate
from handoff.domain.service.reward_ledger import RewardLedger
from handoff.domain.service.token_signer import TokenSigner
from handoff.infrastructure.config import ConfigurationError, Settings
from handoff.infrastructure.persistence.json_deal_repository import JsonDealRepository
from handoff.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from handoff.infrastructure.persistence.json_rating_repository import (
    JsonRatingRepository,
)
from handoff.infrastructure.persistence.json_reputation_repository import (
    JsonReputationRepository,
)
from handoff.infrastructure.persistence.json_store import JsonStore


@dataclass
class Container:

    settings: Settings
    store: JsonStore
    order_repo: JsonOrderRepository
    reputation_repo: JsonReputationRepository
    rating_repo: JsonRatingRepository
    deal_repo: JsonDealRepository
    ledger: RewardLedger
    rating_gate: RatingGate
    _signer: TokenSigner | None = None

    @property
    def signer(self) -> TokenSigner:
        """The token signer; only handoff-code operations need a secret."""
        if self._signer is None:
            if not self.settings.can_sign:
                raise ConfigurationError(
                    "HANDOFF_SIGNING_SECRET is not set, handoff codes are unavailable"
                )
            self._signer = TokenSigner(
                keys=self.settings.signing_keys,
                active_key_id=self.settings.signing_key_id,
                ttl=self.settings.token_ttl,
            )
        return self._signer


def build_container(settings: Settings) -> Container:
    store = JsonStore(settings.data_dir / "handoff.json")
    reputation_repo = JsonReputationRepository(store)
    rating_repo = JsonRatingRepository(store)
    deal_repo = JsonDealRepository(store)
    return Container(
        settings=settings,
        store=store,
        order_repo=JsonOrderRepository(store),
        reputation_repo=reputation_repo,
        rating_repo=rating_repo,
        deal_repo=deal_repo,
        ledger=RewardLedger(
            reputation_repo,
            deal_repo,
            seller_points=settings.seller_points,
            buyer_points=settings.buyer_points,
            trusted_seller_deals=settings.trusted_seller_deals,
        ),
        rating_gate=RatingGate(rating_repo, reputation_repo),
    )
