"""DealRecord: append-only history entry for a completed handoff."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from handoff.domain.model.value_objects import Money


@dataclass(frozen=True)
class DealRecord:

    order_id: str
    item_id: str
    seller_id: str
    buyer_id: str
    amount: Money
    seller_points: int
    buyer_points: int
    completed_at: datetime
