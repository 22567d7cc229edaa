"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from handoff.domain.exceptions import ConcurrentUpdateError
from handoff.domain.model.order import Order, OrderStatus, TokenState
from handoff.domain.model.value_objects import Money
from handoff.domain.repository.order_repository import OrderRepository
from handoff.infrastructure.persistence.json_store import JsonStore


def _dt(raw: str | None) -> datetime | None:
    return datetime.fromisoformat(raw) if raw else None


def _iso(moment: datetime | None) -> str | None:
    return moment.isoformat() if moment is not None else None


class JsonOrderRepository(OrderRepository):

    def __init__(self, store: JsonStore) -> None:
        self._store = store

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> str:
        return uuid.uuid4().hex

    def get_by_id(self, order_id: str) -> Order | None:
        for raw in self._store.load("orders"):
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def save(self, order: Order, expected_version: int | None = None) -> None:
        with self._store.edit("orders") as orders:
            if order.id is None:
                order.id = self.next_id()
                order.version = 1
                orders.append(self._to_raw(order))
                return

            for i, raw in enumerate(orders):
                if raw["id"] != order.id:
                    continue
                if expected_version is not None and raw["version"] != expected_version:
                    raise ConcurrentUpdateError(
                        f"Order {order.id} is at version {raw['version']}, "
                        f"expected {expected_version}"
                    )
                order.version = raw["version"] + 1
                orders[i] = self._to_raw(order)
                return

            if expected_version is not None:
                raise ConcurrentUpdateError(f"Order {order.id} no longer exists")
            order.version = 1
            orders.append(self._to_raw(order))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "version": order.version,
            "item_id": order.item_id,
            "seller_id": order.seller_id,
            "buyer_id": order.buyer_id,
            "amount": str(order.amount.amount),
            "currency": order.amount.currency,
            "status": order.status.value,
            "seller_confirmed": order.seller_confirmed,
            "seller_confirmed_at": _iso(order.seller_confirmed_at),
            "buyer_confirmed": order.buyer_confirmed,
            "buyer_confirmed_at": _iso(order.buyer_confirmed_at),
            "completed_at": _iso(order.completed_at),
            "cancelled_by": order.cancelled_by,
            "cancelled_at": _iso(order.cancelled_at),
            "dispute_raised_by": order.dispute_raised_by,
            "dispute_reason": order.dispute_reason,
            "dispute_status": order.dispute_status,
            "token_issued_at": _iso(order.token_issued_at),
            "token_expires_at": _iso(order.token_expires_at),
            "token_state": order.token_state.value,
            "created_at": order.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        return Order(
            id=raw["id"],
            item_id=raw["item_id"],
            seller_id=raw["seller_id"],
            buyer_id=raw["buyer_id"],
            amount=Money(Decimal(raw["amount"]), raw.get("currency", "INR")),
            status=OrderStatus(raw["status"]),
            seller_confirmed=raw["seller_confirmed"],
            seller_confirmed_at=_dt(raw["seller_confirmed_at"]),
            buyer_confirmed=raw["buyer_confirmed"],
            buyer_confirmed_at=_dt(raw["buyer_confirmed_at"]),
            completed_at=_dt(raw.get("completed_at")),
            cancelled_by=raw.get("cancelled_by"),
            cancelled_at=_dt(raw.get("cancelled_at")),
            dispute_raised_by=raw.get("dispute_raised_by"),
            dispute_reason=raw.get("dispute_reason"),
            dispute_status=raw.get("dispute_status"),
            token_issued_at=_dt(raw.get("token_issued_at")),
            token_expires_at=_dt(raw.get("token_expires_at")),
            token_state=TokenState(raw.get("token_state", "none")),
            created_at=datetime.fromisoformat(raw["created_at"]),
            version=raw["version"],
        )
