"""CLI commands for basket pricing previews."""

from __future__ import annotations

import click

from fulfillment.application.price_basket import PriceBasketHandler
from fulfillment.domain.exceptions import DomainException
from fulfillment.infrastructure.bootstrap import Services
from fulfillment.infrastructure.cli.parsing import parse_items


@click.command("price")
@click.option("--items", required=True, help="Items as 'ItemId:Qty,ItemId:Qty'.")
@click.pass_obj
def basket_price(services: Services, items: str) -> None:
    """Show what a basket costs under the promotions in force."""
    handler = PriceBasketHandler(engine=services.promotions, catalog_repo=services.catalog)

    try:
        dto = handler.handle(parse_items(items))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"  {'Original total':<24} {dto.original_total:>14}")
    for item_name, savings in dto.item_discounts:
        click.echo(f"    {item_name:<22} -{savings:>13}")
    click.echo(f"  {'After discounts':<24} {dto.after_discount_total:>14}")
    click.echo(f"  {'Full reductions':<24} -{dto.total_reduction:>13}")
    click.echo(f"  {'-'*39}")
    click.echo(f"  {'Final total':<24} {dto.final_total:>14}")
    click.echo(f"  {'You save':<24} {dto.total_savings:>14}")
    if dto.applied_promotions:
        click.echo()
        click.echo("Applied: " + ", ".join(dto.applied_promotions))
