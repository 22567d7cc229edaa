"""CLI commands for handoff codes."""

from __future__ import annotations

import click

from handoff.application.issue_token import IssueHandoffTokenHandler
from handoff.application.verify_token import VerifyAndConsumeTokenHandler
from handoff.domain.exceptions import DomainException
from handoff.infrastructure.bootstrap import Container
from handoff.infrastructure.cli.common import pass_container, to_click_error
from handoff.infrastructure.config import ConfigurationError


@click.command("issue")
@click.option("--order", "order_id", required=True, help="Order ID.")
@click.option("--as", "user_id", required=True, help="Acting user ID (the seller).")
@pass_container
def token_issue(container: Container, order_id: str, user_id: str) -> None:
    """Generate a handoff code to show the buyer."""
    try:
        handler = IssueHandoffTokenHandler(container.order_repo, container.signer)
    except ConfigurationError as exc:
        raise click.ClickException(str(exc))

    try:
        dto = handler.handle(order_id, user_id)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(dto.token)
    click.echo(f"Valid until {dto.expires_at}", err=True)


@click.command("scan")
@click.option("--token", "token", required=True, help="Handoff code read from the seller.")
@click.option("--as", "user_id", required=True, help="Acting user ID (the buyer).")
@pass_container
def token_scan(container: Container, token: str, user_id: str) -> None:
    """Verify the seller's handoff code."""
    try:
        handler = VerifyAndConsumeTokenHandler(container.order_repo, container.signer)
    except ConfigurationError as exc:
        raise click.ClickException(str(exc))

    try:
        dto = handler.handle(token, user_id)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Code verified for order {dto.order_id}")
    click.echo(f"Seller: {dto.seller_id}")
    click.echo(f"Item:   {dto.item_id}  ({dto.amount})")
