"""Small immutable values of the handoff domain: party roles, prices, stars.

Each one validates on construction, so an invalid price or rating never
reaches an aggregate.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum

from handoff.domain.exceptions import ValidationError


class PartyRole(Enum):
    BUYER = "buyer"
    SELLER = "seller"

    @property
    def other(self) -> PartyRole:
        return PartyRole.SELLER if self is PartyRole.BUYER else PartyRole.BUYER

    @staticmethod
    def parse(raw: str) -> PartyRole:
        try:
            return PartyRole(raw.strip().lower())
        except ValueError as exc:
            raise ValidationError(
                f"Unknown party role {raw!r}, expected 'buyer' or 'seller'"
            ) from exc


@dataclass(frozen=True)
class Money:
    """Agreed price of a deal.

    Informational only: nothing in the handoff flow moves money, the
    amount is carried so the completed-deal history can show it.
    """

    amount: Decimal
    currency: str = "INR"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Price must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Price cannot be negative, got {self.amount}"
            )

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = "INR") -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)), currency)
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid price: {amount!r}") from exc


MIN_STARS = 1
MAX_STARS = 5


@dataclass(frozen=True)
class Stars:
    """A 1-5 star score."""

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass; True is not a rating
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ValidationError(
                f"Rating must be an integer, got {type(self.value).__name__}"
            )
        if not MIN_STARS <= self.value <= MAX_STARS:
            raise ValidationError(
                f"Rating must be between {MIN_STARS} and {MAX_STARS}, got {self.value}"
            )

    def __str__(self) -> str:
        return "*" * self.value
