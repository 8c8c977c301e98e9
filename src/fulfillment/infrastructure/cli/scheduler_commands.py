"""CLI commands for the delivery-status scheduler."""

from __future__ import annotations

import time

import click

from fulfillment.domain.exceptions import DomainException
from fulfillment.infrastructure.bootstrap import Services


@click.command("run")
@click.option("--pending-to-shipped", type=int, default=None, help="Seconds before Pending becomes Shipped.")
@click.option("--shipped-to-delivered", type=int, default=None, help="Seconds before Shipped becomes Delivered.")
@click.pass_obj
def scheduler_run(
    services: Services,
    pending_to_shipped: int | None,
    shipped_to_delivered: int | None,
) -> None:
    """Advance order statuses in the foreground until interrupted."""
    if not services.settings.auto_update_enabled:
        raise click.ClickException("Automatic status updates are disabled in the config.")

    try:
        services.scheduler.enable(pending_to_shipped, shipped_to_delivered)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        "Scheduler running "
        f"(Pending->Shipped {services.scheduler.pending_to_shipped.total_seconds():g}s, "
        f"Shipped->Delivered {services.scheduler.shipped_to_delivered.total_seconds():g}s). "
        "Press Ctrl+C to stop."
    )
    try:
        while services.scheduler.is_enabled:
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass
    finally:
        services.scheduler.disable()
    click.echo("Scheduler stopped.")


@click.command("tick")
@click.pass_obj
def scheduler_tick(services: Services) -> None:
    """Run a single scan and report how many orders moved."""
    try:
        changed = services.scheduler.run_once()
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"{changed} order(s) advanced.")
