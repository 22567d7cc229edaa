"""Pieces shared by the command modules: the container hook and error messages."""

from __future__ import annotations

import click

from handoff.domain.exceptions import DomainException
from handoff.infrastructure.bootstrap import Container

pass_container = click.make_pass_decorator(Container)

USER_MESSAGES = {
    "order_not_found": "That order does not exist.",
    "order_not_pending": "This order is already closed.",
    "order_not_completed": "You can rate once both of you have confirmed the handoff.",
    "malformed_token": "That is not a handoff code. Scan the seller's QR code again.",
    "unauthorized": "You are not part of this order.",
    "invalid_signature": "This code is not valid for this order. Scan the seller's latest code.",
    "expired": "This code has expired, ask the seller to generate a new one.",
    "already_used": "This code has already been used, ask the seller to generate a new one.",
    "duplicate_rating": "You already rated this order.",
    "concurrent_update": "The order changed while you were confirming, please try again.",
}


def to_click_error(exc: DomainException) -> click.ClickException:
    headline = USER_MESSAGES.get(exc.kind)
    if headline is None:
        return click.ClickException(str(exc))
    return click.ClickException(f"{headline} ({exc.kind}: {exc})")
