import logging

import click

from handoff.infrastructure.bootstrap import build_container
from handoff.infrastructure.cli.account_commands import account_show
from handoff.infrastructure.cli.order_commands import (
    order_cancel,
    order_confirm,
    order_dispute,
    order_open,
    order_show,
)
from handoff.infrastructure.cli.rating_commands import rating_submit
from handoff.infrastructure.cli.token_commands import token_issue, token_scan
from handoff.infrastructure.config import load_settings


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Campus handoff: confirm in-person deals."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if ctx.obj is None:
        ctx.obj = build_container(load_settings())


@cli.group()
def order() -> None:
    """Open, confirm and close orders."""


@cli.group()
def token() -> None:
    """Issue and scan handoff codes."""


@cli.group()
def rating() -> None:
    """Rate the other party of a completed order."""


@cli.group()
def account() -> None:
    """Inspect reputation accounts."""


# Register subcommands
order.add_command(order_cancel)
order.add_command(order_confirm)
order.add_command(order_dispute)
order.add_command(order_open)
order.add_command(order_show)
token.add_command(token_issue)
token.add_command(token_scan)
rating.add_command(rating_submit)
account.add_command(account_show)
