"""Settings loaded from ``config.yaml``.

Example::

    data_files:
      items: data/items.csv
      orders: data/orders.csv
      promotions: data/promotions.csv
    auto_update:
      enabled: true
      pending_to_shipped_seconds: 10
      shipped_to_delivered_seconds: 20
    logging:
      level: INFO

Anything missing falls back to the defaults above. Relative paths are
resolved against the directory holding the config file.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from fulfillment.domain.exceptions import DomainException

CONFIG_ENV_VAR = "FULFILLMENT_CONFIG"
DEFAULT_CONFIG_FILE = "config.yaml"


class ConfigurationError(DomainException):
    """The configuration file exists but cannot be used."""


@dataclass(frozen=True)
class Settings:
    items_file: Path
    orders_file: Path
    promotions_file: Path
    auto_update_enabled: bool = True
    pending_to_shipped_seconds: int = 10
    shipped_to_delivered_seconds: int = 20
    log_level: str = "INFO"

    @staticmethod
    def defaults(base_dir: Path) -> Settings:
        return Settings(
            items_file=base_dir / "data" / "items.csv",
            orders_file=base_dir / "data" / "orders.csv",
            promotions_file=base_dir / "data" / "promotions.csv",
        )


def load_settings(config_path: Path) -> Settings:
    """Read *config_path*; a missing file yields the defaults."""
    base_dir = config_path.resolve().parent
    if not config_path.exists():
        return Settings.defaults(base_dir)

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Cannot read config {config_path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config {config_path} must be a mapping")

    data_files = _section(raw, "data_files")
    auto_update = _section(raw, "auto_update")
    logging_section = _section(raw, "logging")
    defaults = Settings.defaults(base_dir)

    try:
        return Settings(
            items_file=_path(base_dir, data_files.get("items"), defaults.items_file),
            orders_file=_path(base_dir, data_files.get("orders"), defaults.orders_file),
            promotions_file=_path(
                base_dir, data_files.get("promotions"), defaults.promotions_file
            ),
            auto_update_enabled=bool(auto_update.get("enabled", defaults.auto_update_enabled)),
            pending_to_shipped_seconds=_seconds(
                auto_update.get(
                    "pending_to_shipped_seconds", defaults.pending_to_shipped_seconds
                )
            ),
            shipped_to_delivered_seconds=_seconds(
                auto_update.get(
                    "shipped_to_delivered_seconds", defaults.shipped_to_delivered_seconds
                )
            ),
            log_level=str(logging_section.get("level", defaults.log_level)).upper(),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid value in {config_path}: {exc}") from exc


def _section(raw: dict, name: str) -> dict:
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"Config section '{name}' must be a mapping")
    return section


def _path(base_dir: Path, value: object, default: Path) -> Path:
    if value is None:
        return default
    path = Path(str(value))
    return path if path.is_absolute() else base_dir / path


def _seconds(value: object) -> int:
    seconds = int(value)  # type: ignore[call-overload]
    if seconds < 0:
        raise ValueError(f"duration cannot be negative: {seconds}")
    return seconds
