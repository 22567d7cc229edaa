"""JSON-file-backed implementation of DealRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from handoff.domain.model.deal import DealRecord
from handoff.domain.model.value_objects import Money
from handoff.domain.repository.deal_repository import DealRepository
from handoff.infrastructure.persistence.json_store import JsonStore


class JsonDealRepository(DealRepository):

    def __init__(self, store: JsonStore) -> None:
        self._store = store

    def add(self, record: DealRecord) -> None:
        with self._store.edit("deals") as records:
            records.append(self._to_raw(record))

    def list_for_user(self, user_id: str) -> list[DealRecord]:
        return [
            self._to_domain(raw)
            for raw in self._store.load("deals")
            if user_id in (raw["seller_id"], raw["buyer_id"])
        ]

    @staticmethod
    def _to_raw(record: DealRecord) -> dict:
        return {
            "order_id": record.order_id,
            "item_id": record.item_id,
            "seller_id": record.seller_id,
            "buyer_id": record.buyer_id,
            "amount": str(record.amount.amount),
            "currency": record.amount.currency,
            "seller_points": record.seller_points,
            "buyer_points": record.buyer_points,
            "completed_at": record.completed_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> DealRecord:
        return DealRecord(
            order_id=raw["order_id"],
            item_id=raw["item_id"],
            seller_id=raw["seller_id"],
            buyer_id=raw["buyer_id"],
            amount=Money(Decimal(raw["amount"]), raw.get("currency", "INR")),
            seller_points=raw["seller_points"],
            buyer_points=raw["buyer_points"],
            completed_at=datetime.fromisoformat(raw["completed_at"]),
        )
