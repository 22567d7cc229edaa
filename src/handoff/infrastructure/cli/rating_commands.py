"""CLI commands for ratings."""

from __future__ import annotations

import click

from handoff.application.submit_rating import SubmitRatingHandler
from handoff.domain.exceptions import DomainException
from handoff.infrastructure.bootstrap import Container
from handoff.infrastructure.cli.common import pass_container, to_click_error


@click.command("submit")
@click.option("--order", "order_id", required=True, help="Completed order ID.")
@click.option("--as", "user_id", required=True, help="Acting user ID.")
@click.option("--stars", required=True, type=click.IntRange(1, 5), help="1 to 5.")
@click.option("--review", default=None, help="Optional review text.")
@pass_container
def rating_submit(
    container: Container, order_id: str, user_id: str, stars: int, review: str | None
) -> None:
    """Rate the other party of a completed order."""
    handler = SubmitRatingHandler(container.order_repo, container.rating_gate, container.store)

    try:
        dto = handler.handle(order_id, user_id, stars, review)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Rated {dto.ratee_id} {dto.stars}/5 for order {dto.order_id}.")
