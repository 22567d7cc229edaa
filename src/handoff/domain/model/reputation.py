"""ReputationAccount: a user's campus points, deal count and rating summary.

Only the reward ledger and the rating gate change an account; there is no
path from user input to these counters.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from handoff.domain.exceptions import ValidationError

_TWO_PLACES = Decimal("0.01")


@dataclass
class ReputationAccount:

    user_id: str
    campus_points: int = 0
    deals_completed: int = 0
    trusted_seller: bool = False
    total_ratings: int = 0
    stars_received: int = 0

    @property
    def average_rating(self) -> Decimal:
        if not self.total_ratings:
            return Decimal("0.00")
        return (Decimal(self.stars_received) / self.total_ratings).quantize(
            _TWO_PLACES, rounding=ROUND_HALF_UP
        )

    def credit_deal(self, points: int, trusted_seller_threshold: int | None = None) -> None:
        """Add *points* and one completed deal.

        With a threshold, the account earns the trusted-seller badge once
        its deal count reaches it.  The badge is never taken away.
        """
        if points < 0:
            raise ValidationError("Reward points cannot be negative")
        self.campus_points += points
        self.deals_completed += 1
        if (
            trusted_seller_threshold is not None
            and self.deals_completed >= trusted_seller_threshold
        ):
            self.trusted_seller = True

    def record_rating(self, stars: int) -> None:
        self.total_ratings += 1
        self.stars_received += stars
