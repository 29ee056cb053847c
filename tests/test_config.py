import tomllib
import tomli_w
from decimal import Decimal
from pathlib import Path

from config import Config, config_from_dict, config_to_dict, load_config


class TestConfig:
    """Tests for configuration loading."""

    def test_defaults(self):
        """Test that an empty document yields the default configuration."""
        config = config_from_dict({})

        assert config.db_filename == "casa.db"
        assert config.llm_enabled is False
        assert config.fallback_exchange_rate == Decimal("5.42")
        assert config.exchange_rate_cache_seconds == 3600
        assert config.settlement_split_ratio == Decimal("1.0")
        assert config.settlement_reference_color == "blue"
        assert config.uncategorized_category == "Other"
        assert config.household_history_months == 6

    def test_sections_are_read(self, tmp_path):
        """Test that every TOML section maps onto the Config fields."""
        config = config_from_dict(
            {
                "base_dir": str(tmp_path),
                "database": {"filename": "house.db"},
                "llm": {"enabled": True, "openai": {"api_key": "sk-test"}},
                "currency": {"local": "EUR", "foreign": "GBP"},
                "exchange_rate": {"fallback_rate": "1.17", "cache_seconds": 60},
                "settlement": {"split_ratio": "0.5", "reference_color": "pink"},
                "household": {"history_months": 3},
            }
        )

        assert config.db_path == tmp_path / "db" / "house.db"
        assert config.log_dir == tmp_path / "logs"
        assert config.llm_enabled is True
        assert config.llm_openai_api_key == "sk-test"
        assert config.local_currency == "EUR"
        assert config.foreign_currency == "GBP"
        assert config.fallback_exchange_rate == Decimal("1.17")
        assert config.exchange_rate_cache_seconds == 60
        assert config.settlement_split_ratio == Decimal("0.5")
        assert config.settlement_reference_color == "pink"
        assert config.household_history_months == 3

    def test_round_trip_through_toml(self, test_config):
        """Test that a written config reads back unchanged."""
        document = tomllib.loads(tomli_w.dumps(config_to_dict(test_config)))

        assert config_from_dict(document) == test_config

    def test_load_config_writes_default_file(self, tmp_path, monkeypatch):
        """Test that load_config creates ~/.config/casa.toml on first run."""
        monkeypatch.setattr(Path, "home", lambda: tmp_path)

        config = load_config()

        assert (tmp_path / ".config" / "casa.toml").exists()
        assert config == Config.default()
