"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions. Nothing here is kept at
module level: callers build one ``Services`` and pass it around.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from fulfillment.domain.clock import Clock
from fulfillment.domain.service.lifecycle_scheduler import LifecycleScheduler
from fulfillment.domain.service.order_ledger import OrderLedger
from fulfillment.domain.service.promotion_engine import PromotionEngine
from fulfillment.infrastructure.config import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_FILE,
    Settings,
)
from fulfillment.infrastructure.persistence.csv_catalog_repository import (
    CsvCatalogRepository,
)
from fulfillment.infrastructure.persistence.csv_order_repository import (
    CsvOrderRepository,
)
from fulfillment.infrastructure.persistence.csv_promotion_repository import (
    CsvPromotionRepository,
)
from fulfillment.infrastructure.system_clock import SystemClock


@dataclass
class Services:
    settings: Settings
    catalog: CsvCatalogRepository
    ledger: OrderLedger
    promotions: PromotionEngine
    scheduler: LifecycleScheduler


def resolve_config_path(explicit: str | None = None) -> Path:
    return Path(explicit or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILE)


def build_services(settings: Settings, clock: Clock | None = None) -> Services:
    """Build and load catalog, ledger, promotion engine and scheduler."""
    clock = clock or SystemClock()

    catalog = CsvCatalogRepository(settings.items_file)
    ledger = OrderLedger(
        order_repo=CsvOrderRepository(settings.orders_file),
        catalog_repo=catalog,
        clock=clock,
    )
    promotions = PromotionEngine(
        promotion_repo=CsvPromotionRepository(settings.promotions_file),
        clock=clock,
    )
    scheduler = LifecycleScheduler(
        ledger,
        pending_to_shipped_seconds=settings.pending_to_shipped_seconds,
        shipped_to_delivered_seconds=settings.shipped_to_delivered_seconds,
    )

    ledger.load()
    promotions.load()
    return Services(
        settings=settings,
        catalog=catalog,
        ledger=ledger,
        promotions=promotions,
        scheduler=scheduler,
    )
