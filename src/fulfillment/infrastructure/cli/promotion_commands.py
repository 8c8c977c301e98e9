"""CLI commands for promotions."""

from __future__ import annotations

from datetime import datetime

import click

from fulfillment.application.add_promotion import AddPromotionHandler
from fulfillment.application.dto import PromotionDTO
from fulfillment.application.list_promotions import ListPromotionsHandler
from fulfillment.application.update_promotion import UpdatePromotionHandler
from fulfillment.domain.exceptions import DomainException
from fulfillment.domain.model.promotion import ALL_ITEMS
from fulfillment.infrastructure.bootstrap import Services
from fulfillment.infrastructure.cli.parsing import DATE_FORMATS, as_utc

_promotion_id = click.option("--id", "promotion_id", required=True, help="Promotion id.")
_start = click.option("--start", required=True, type=click.DateTime(DATE_FORMATS), help="Start (UTC).")
_end = click.option("--end", required=True, type=click.DateTime(DATE_FORMATS), help="End (UTC).")


def _echo_promotion(dto: PromotionDTO, verb: str) -> None:
    click.echo(f"Promotion {dto.promotion_id} {verb}: {dto.name} [{dto.tag}]")


@click.command("list")
@click.option("--in-force", is_flag=True, default=False, help="Only promotions valid right now.")
@click.pass_obj
def promotion_list(services: Services, in_force: bool) -> None:
    """List promotions."""
    rows = ListPromotionsHandler(engine=services.promotions).handle(in_force_only=in_force)

    if not rows:
        click.echo("No promotions found.")
        return

    click.echo(
        f"{'ID':<10} {'Name':<20} {'Tag':<12} {'Applies to':<16} {'Status':<10} {'Ends':<24}"
    )
    click.echo("-" * 96)
    for dto in rows:
        if not dto.is_active:
            status = "disabled"
        elif dto.in_force:
            status = "in force"
        else:
            status = "idle"
        click.echo(
            f"{dto.promotion_id:<10} {dto.name:<20} {dto.tag:<12} {dto.target:<16} {status:<10} {dto.end_time:<24}"
        )


@click.command("add-discount")
@click.option("--name", required=True, help="Display name.")
@click.option("--rate", required=True, help="Price multiplier between 0 and 1, e.g. 0.8.")
@click.option("--item", "item_id", default=ALL_ITEMS, show_default=True, help="Target item id ('-1' for all items).")
@_start
@_end
@click.pass_obj
def promotion_add_discount(
    services: Services, name: str, rate: str, item_id: str, start: datetime, end: datetime
) -> None:
    """Add a discount promotion."""
    handler = AddPromotionHandler(engine=services.promotions)
    try:
        dto = handler.add_discount(name, rate, as_utc(start), as_utc(end), item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _echo_promotion(dto, "added")


@click.command("add-reduction")
@click.option("--name", required=True, help="Display name.")
@click.option("--threshold", required=True, help="Subtotal that triggers the reduction.")
@click.option("--reduction", required=True, help="Amount taken off.")
@_start
@_end
@click.pass_obj
def promotion_add_reduction(
    services: Services, name: str, threshold: str, reduction: str, start: datetime, end: datetime
) -> None:
    """Add a full-reduction promotion."""
    handler = AddPromotionHandler(engine=services.promotions)
    try:
        dto = handler.add_full_reduction(name, threshold, reduction, as_utc(start), as_utc(end))
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _echo_promotion(dto, "added")


@click.command("delete")
@_promotion_id
@click.pass_obj
def promotion_delete(services: Services, promotion_id: str) -> None:
    """Delete a promotion."""
    try:
        UpdatePromotionHandler(engine=services.promotions).delete(promotion_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Promotion {promotion_id} deleted.")


def _run_update(services: Services, action, *args) -> None:
    handler = UpdatePromotionHandler(engine=services.promotions)
    try:
        dto = getattr(handler, action)(*args)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _echo_promotion(dto, "updated")


@click.command("activate")
@_promotion_id
@click.pass_obj
def promotion_activate(services: Services, promotion_id: str) -> None:
    """Enable a promotion."""
    _run_update(services, "set_active", promotion_id, True)


@click.command("deactivate")
@_promotion_id
@click.pass_obj
def promotion_deactivate(services: Services, promotion_id: str) -> None:
    """Disable a promotion."""
    _run_update(services, "set_active", promotion_id, False)


@click.command("rename")
@_promotion_id
@click.option("--name", required=True)
@click.pass_obj
def promotion_rename(services: Services, promotion_id: str, name: str) -> None:
    """Change a promotion's display name."""
    _run_update(services, "rename", promotion_id, name)


@click.command("window")
@_promotion_id
@_start
@_end
@click.pass_obj
def promotion_window(services: Services, promotion_id: str, start: datetime, end: datetime) -> None:
    """Change a promotion's validity window."""
    _run_update(services, "set_window", promotion_id, as_utc(start), as_utc(end))


@click.command("rate")
@_promotion_id
@click.option("--rate", required=True)
@click.pass_obj
def promotion_rate(services: Services, promotion_id: str, rate: str) -> None:
    """Change a discount's rate."""
    _run_update(services, "set_rate", promotion_id, rate)


@click.command("target")
@_promotion_id
@click.option("--item", "item_id", required=True)
@click.pass_obj
def promotion_target(services: Services, promotion_id: str, item_id: str) -> None:
    """Change the item a discount applies to."""
    _run_update(services, "set_target", promotion_id, item_id)


@click.command("threshold")
@_promotion_id
@click.option("--amount", required=True)
@click.pass_obj
def promotion_threshold(services: Services, promotion_id: str, amount: str) -> None:
    """Change a full-reduction's threshold."""
    _run_update(services, "set_threshold", promotion_id, amount)


@click.command("reduction")
@_promotion_id
@click.option("--amount", required=True)
@click.pass_obj
def promotion_reduction(services: Services, promotion_id: str, amount: str) -> None:
    """Change a full-reduction's reduction amount."""
    _run_update(services, "set_reduction", promotion_id, amount)
