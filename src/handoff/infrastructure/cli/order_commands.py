"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from handoff.application.cancel_order import CancelOrderHandler
from handoff.application.confirm_order import ConfirmOrderHandler
from handoff.application.dto import OrderDTO
from handoff.application.open_order import OpenOrderHandler
from handoff.application.raise_dispute import RaiseDisputeHandler
from handoff.application.show_order import ShowOrderHandler
from handoff.domain.exceptions import DomainException
from handoff.domain.model.value_objects import PartyRole
from handoff.infrastructure.bootstrap import Container
from handoff.infrastructure.cli.common import pass_container, to_click_error
from handoff.infrastructure.config import ConfigurationError


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.id}  (status={dto.status})")
    click.echo(f"Item:     {dto.item_id}  ({dto.amount})")
    click.echo(f"Seller:   {dto.seller_id}  confirmed={'yes' if dto.seller_confirmed else 'no'}"
               + (f" at {dto.seller_confirmed_at}" if dto.seller_confirmed_at else ""))
    click.echo(f"Buyer:    {dto.buyer_id}  confirmed={'yes' if dto.buyer_confirmed else 'no'}"
               + (f" at {dto.buyer_confirmed_at}" if dto.buyer_confirmed_at else ""))
    click.echo(f"Created:  {dto.created_at}")
    if dto.completed_at:
        click.echo(f"Completed: {dto.completed_at}")
    if dto.token_state != "none":
        click.echo(f"Handoff code: {dto.token_state} (expires {dto.token_expires_at})")
    if dto.dispute_status:
        click.echo(
            f"Dispute:  {dto.dispute_status}, raised by {dto.dispute_raised_by}: "
            f"{dto.dispute_reason}"
        )


@click.command("open")
@click.option("--item", "item_id", required=True, help="Listing ID being sold.")
@click.option("--seller", "seller_id", required=True, help="Seller user ID.")
@click.option("--buyer", "buyer_id", required=True, help="Buyer user ID.")
@click.option("--amount", required=True, help="Agreed price (informational).")
@pass_container
def order_open(container: Container, item_id: str, seller_id: str, buyer_id: str, amount: str) -> None:
    """Open a pending order for an agreed deal."""
    handler = OpenOrderHandler(order_repo=container.order_repo)

    try:
        dto = handler.handle(item_id=item_id, seller_id=seller_id, buyer_id=buyer_id, amount=amount)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Order {dto.id} opened  (status={dto.status})")


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
@click.option("--as", "user_id", required=True, help="Acting user ID.")
@pass_container
def order_show(container: Container, order_id: str, user_id: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=container.order_repo)

    try:
        dto = handler.handle(order_id, viewer_id=user_id)
    except DomainException as exc:
        raise to_click_error(exc)

    _display_order(dto)


@click.command("confirm")
@click.option("--id", "order_id", required=True, help="Order ID to confirm.")
@click.option("--as", "user_id", required=True, help="Acting user ID.")
@click.option(
    "--role",
    type=click.Choice([r.value for r in PartyRole]),
    required=True,
    help="Your side of the deal.",
)
@click.option("--token", "token", default=None, help="Seller's handoff code (buyers only).")
@pass_container
def order_confirm(
    container: Container, order_id: str, user_id: str, role: str, token: str | None
) -> None:
    """Confirm the handoff happened."""
    try:
        signer = container.signer if token else None
    except ConfigurationError as exc:
        raise click.ClickException(str(exc))

    handler = ConfirmOrderHandler(
        order_repo=container.order_repo,
        ledger=container.ledger,
        unit_of_work=container.store,
        signer=signer,
    )

    try:
        result = handler.handle(order_id, user_id, PartyRole.parse(role), token=token)
    except DomainException as exc:
        raise to_click_error(exc)

    if result.just_completed:
        click.echo(f"Order {order_id} completed. Points awarded to both of you.")
    else:
        click.echo(f"Confirmation recorded for order {order_id}. Waiting for the other party.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, help="Order ID to cancel.")
@click.option("--as", "user_id", required=True, help="Acting user ID.")
@pass_container
def order_cancel(container: Container, order_id: str, user_id: str) -> None:
    """Cancel a pending order."""
    handler = CancelOrderHandler(order_repo=container.order_repo)

    try:
        handler.handle(order_id, user_id)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Order {order_id} cancelled.")


@click.command("dispute")
@click.option("--id", "order_id", required=True, help="Order ID to dispute.")
@click.option("--as", "user_id", required=True, help="Acting user ID.")
@click.option("--reason", required=True, help="What went wrong.")
@pass_container
def order_dispute(container: Container, order_id: str, user_id: str, reason: str) -> None:
    """Flag a pending order for moderator review."""
    handler = RaiseDisputeHandler(order_repo=container.order_repo)

    try:
        handler.handle(order_id, user_id, reason)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Dispute raised on order {order_id}. A moderator will follow up.")
