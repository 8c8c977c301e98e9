"""Input parsing shared by the CLI commands."""

from __future__ import annotations

from datetime import datetime, timezone

import click

from fulfillment.application.dto import BasketItemSpec

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%d %H:%M:%S"]


def parse_items(raw: str) -> list[BasketItemSpec]:
    """Parse '1:3,2:5' (item id : quantity) into BasketItemSpec list."""
    specs: list[BasketItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ItemId:Quantity'."
            )
        item_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for item '{item_id}'."
            )
        specs.append(BasketItemSpec(item_id=item_id.strip(), quantity=qty))
    return specs


def as_utc(moment: datetime) -> datetime:
    """Dates typed on the command line are taken as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
