import click

from fulfillment.domain.exceptions import DomainException
from fulfillment.infrastructure.bootstrap import build_services, resolve_config_path
from fulfillment.infrastructure.cli.basket_commands import basket_price
from fulfillment.infrastructure.cli.order_commands import (
    order_address,
    order_create,
    order_list,
    order_show,
    order_status,
)
from fulfillment.infrastructure.cli.promotion_commands import (
    promotion_activate,
    promotion_add_discount,
    promotion_add_reduction,
    promotion_deactivate,
    promotion_delete,
    promotion_list,
    promotion_rate,
    promotion_reduction,
    promotion_rename,
    promotion_target,
    promotion_threshold,
    promotion_window,
)
from fulfillment.infrastructure.cli.scheduler_commands import scheduler_run, scheduler_tick
from fulfillment.infrastructure.config import CONFIG_ENV_VAR, load_settings
from fulfillment.infrastructure.logging import configure_logging


@click.group()
@click.option(
    "--config",
    "config_path",
    envvar=CONFIG_ENV_VAR,
    default=None,
    help="Path to config.yaml (default: ./config.yaml).",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None) -> None:
    """Fulfillment — orders, promotions and delivery tracking"""
    try:
        settings = load_settings(resolve_config_path(config_path))
        configure_logging(settings.log_level)
        ctx.obj = build_services(settings)
    except DomainException as exc:
        raise click.ClickException(str(exc))


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def promotion() -> None:
    """Manage promotions."""


@cli.group()
def basket() -> None:
    """Preview basket pricing."""


@cli.group()
def scheduler() -> None:
    """Automatic delivery-status updates."""


# Register subcommands
order.add_command(order_address)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_status)
promotion.add_command(promotion_activate)
promotion.add_command(promotion_add_discount)
promotion.add_command(promotion_add_reduction)
promotion.add_command(promotion_deactivate)
promotion.add_command(promotion_delete)
promotion.add_command(promotion_list)
promotion.add_command(promotion_rate)
promotion.add_command(promotion_reduction)
promotion.add_command(promotion_rename)
promotion.add_command(promotion_target)
promotion.add_command(promotion_threshold)
promotion.add_command(promotion_window)
basket.add_command(basket_price)
scheduler.add_command(scheduler_run)
scheduler.add_command(scheduler_tick)
