"""Tests for settings loading."""

import pytest

from fulfillment.infrastructure.config import ConfigurationError, Settings, load_settings


class TestLoadSettings:

    def test_missing_file_gives_defaults(self, tmp_path):
        settings = load_settings(tmp_path / "config.yaml")
        assert settings == Settings.defaults(tmp_path.resolve())
        assert settings.orders_file == tmp_path.resolve() / "data" / "orders.csv"
        assert settings.auto_update_enabled
        assert settings.pending_to_shipped_seconds == 10
        assert settings.shipped_to_delivered_seconds == 20

    def test_full_file(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text(
            "data_files:\n"
            "  items: stock/items.csv\n"
            "  orders: /var/lib/fulfillment/orders.csv\n"
            "auto_update:\n"
            "  enabled: false\n"
            "  pending_to_shipped_seconds: 3\n"
            "  shipped_to_delivered_seconds: 7\n"
            "logging:\n"
            "  level: debug\n",
            encoding="utf-8",
        )

        settings = load_settings(config)

        assert settings.items_file == tmp_path.resolve() / "stock" / "items.csv"
        assert str(settings.orders_file) == "/var/lib/fulfillment/orders.csv"
        assert settings.promotions_file == tmp_path.resolve() / "data" / "promotions.csv"
        assert not settings.auto_update_enabled
        assert settings.pending_to_shipped_seconds == 3
        assert settings.shipped_to_delivered_seconds == 7
        assert settings.log_level == "DEBUG"

    def test_empty_file_gives_defaults(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("", encoding="utf-8")
        assert load_settings(config).log_level == "INFO"

    def test_non_mapping_rejected(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            load_settings(config)

    def test_negative_duration_rejected(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("auto_update:\n  pending_to_shipped_seconds: -5\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="negative"):
            load_settings(config)

    def test_invalid_yaml_rejected(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("data_files: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Cannot read config"):
            load_settings(config)
