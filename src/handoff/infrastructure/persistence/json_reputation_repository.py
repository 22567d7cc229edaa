"""JSON-file-backed implementation of ReputationRepository."""

from __future__ import annotations

from typing import Callable

from handoff.domain.model.reputation import ReputationAccount
from handoff.domain.repository.reputation_repository import ReputationRepository
from handoff.infrastructure.persistence.json_store import JsonStore


class JsonReputationRepository(ReputationRepository):

    def __init__(self, store: JsonStore) -> None:
        self._store = store

    def get(self, user_id: str) -> ReputationAccount:
        for raw in self._store.load("accounts"):
            if raw["user_id"] == user_id:
                return self._to_domain(raw)
        return ReputationAccount(user_id=user_id)

    def modify(
        self, user_id: str, change: Callable[[ReputationAccount], None]
    ) -> ReputationAccount:
        with self._store.edit("accounts") as records:
            for i, raw in enumerate(records):
                if raw["user_id"] == user_id:
                    account = self._to_domain(raw)
                    change(account)
                    records[i] = self._to_raw(account)
                    return account
            account = ReputationAccount(user_id=user_id)
            change(account)
            records.append(self._to_raw(account))
            return account

    @staticmethod
    def _to_raw(account: ReputationAccount) -> dict:
        return {
            "user_id": account.user_id,
            "campus_points": account.campus_points,
            "deals_completed": account.deals_completed,
            "trusted_seller": account.trusted_seller,
            "total_ratings": account.total_ratings,
            "stars_received": account.stars_received,
        }

    @staticmethod
    def _to_domain(raw: dict) -> ReputationAccount:
        return ReputationAccount(
            user_id=raw["user_id"],
            campus_points=raw.get("campus_points", 0),
            deals_completed=raw.get("deals_completed", 0),
            trusted_seller=raw.get("trusted_seller", False),
            total_ratings=raw.get("total_ratings", 0),
            stars_received=raw.get("stars_received", 0),
        )
