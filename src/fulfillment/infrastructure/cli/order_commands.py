"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from fulfillment.application.create_order import CreateOrderHandler
from fulfillment.application.dto import OrderDTO
from fulfillment.application.list_orders import ListOrdersHandler
from fulfillment.application.show_order import ShowOrderHandler
from fulfillment.application.update_order import UpdateOrderHandler
from fulfillment.domain.exceptions import DomainException
from fulfillment.domain.model.order import InsufficientStock
from fulfillment.infrastructure.bootstrap import Services
from fulfillment.infrastructure.cli.parsing import parse_items


@click.command("create")
@click.option("--user", "user_id", required=True, help="Purchaser id.")
@click.option("--items", required=True, help="Items as 'ItemId:Qty,ItemId:Qty'.")
@click.option("--address", required=True, help="Shipping address.")
@click.pass_obj
def order_create(services: Services, user_id: str, items: str, address: str) -> None:
    """Place a new order (checks and decrements stock)."""
    specs = parse_items(items)

    handler = CreateOrderHandler(ledger=services.ledger, catalog_repo=services.catalog)

    try:
        result = handler.handle(user_id=user_id, item_specs=specs, shipping_address=address)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if isinstance(result, InsufficientStock):
        raise click.ClickException(result.message)

    click.echo(f"Order {result.order_id} created  (status={result.status})")
    _display_lines(result)


def _display_lines(dto: OrderDTO) -> None:
    click.echo()
    click.echo(f"  {'Item':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.item_name:<20} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Order Total':<27} {dto.total:>20}")


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_id}  (status={dto.status})")
    click.echo(f"User:     {dto.user_id}")
    click.echo(f"Created:  {dto.order_time}")
    click.echo(f"Updated:  {dto.status_changed_at}")
    click.echo(f"Ship to:  {dto.shipping_address}")
    _display_lines(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order id to display.")
@click.pass_obj
def order_show(services: Services, order_id: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(ledger=services.ledger)

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--user", "user_id", default=None, help="Only this user's orders.")
@click.pass_obj
def order_list(services: Services, user_id: str | None) -> None:
    """List orders in the order they were placed."""
    orders = ListOrdersHandler(ledger=services.ledger).handle(user_id)

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'Order':<24} {'User':<12} {'Created':<24} {'Total':>12} {'Status':>10}")
    click.echo("-" * 86)
    for dto in orders:
        click.echo(
            f"{dto.order_id:<24} {dto.user_id:<12} {dto.order_time:<24} {dto.total:>12} {dto.status:>10}"
        )
    click.echo(f"{len(orders)} order(s).")


@click.command("status")
@click.option("--id", "order_id", required=True, help="Order id to update.")
@click.option(
    "--status",
    "status_label",
    required=True,
    type=click.Choice(["Pending", "Shipped", "Delivered"], case_sensitive=False),
    help="New status (administrative override).",
)
@click.pass_obj
def order_status(services: Services, order_id: str, status_label: str) -> None:
    """Override an order's delivery status."""
    handler = UpdateOrderHandler(ledger=services.ledger)

    try:
        status = handler.set_status(order_id, status_label.capitalize())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} status set to {status.value}.")


@click.command("address")
@click.option("--id", "order_id", required=True, help="Order id to update.")
@click.option("--address", required=True, help="New shipping address.")
@click.pass_obj
def order_address(services: Services, order_id: str, address: str) -> None:
    """Change an order's shipping address."""
    handler = UpdateOrderHandler(ledger=services.ledger)

    try:
        handler.change_address(order_id, address)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} will ship to {address.strip()}.")
