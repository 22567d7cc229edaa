"""Application service: Show Account use case (query)."""

from __future__ import annotations

from handoff.application.dto import AccountDTO
from handoff.domain.repository.deal_repository import DealRepository
from handoff.domain.repository.reputation_repository import ReputationRepository


class ShowAccountHandler:

    def __init__(
        self,
        reputation_repo: ReputationRepository,
        deal_repo: DealRepository,
    ) -> None:
        self._reputation_repo = reputation_repo
        self._deal_repo = deal_repo

    def handle(self, user_id: str) -> AccountDTO:
        account = self._reputation_repo.get(user_id)
        deals = self._deal_repo.list_for_user(user_id)
        return AccountDTO.from_account(account, deals)
