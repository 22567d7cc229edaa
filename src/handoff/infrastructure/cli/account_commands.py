"""CLI commands for reputation accounts."""

from __future__ import annotations

import click

from handoff.application.show_account import ShowAccountHandler
from handoff.infrastructure.bootstrap import Container
from handoff.infrastructure.cli.common import pass_container


@click.command("show")
@click.option("--user", "user_id", required=True, help="User ID.")
@pass_container
def account_show(container: Container, user_id: str) -> None:
    """Show campus points, deals and rating for a user."""
    handler = ShowAccountHandler(container.reputation_repo, container.deal_repo)
    dto = handler.handle(user_id)

    badge = "  [trusted seller]" if dto.trusted_seller else ""
    click.echo(f"User {dto.user_id}{badge}")
    click.echo(f"Campus points:   {dto.campus_points}")
    click.echo(f"Deals completed: {dto.deals_completed}")
    click.echo(f"Rating:          {dto.average_rating} ({dto.total_ratings} ratings)")

    if dto.deals:
        click.echo()
        click.echo(f"  {'Order':<34} {'Role':<7} {'With':<16} {'Points':>6}")
        click.echo(f"  {'-'*66}")
        for deal in dto.deals:
            click.echo(
                f"  {deal.order_id:<34} {deal.role:<7} {deal.counterparty_id:<16} {deal.points:>6}"
            )
