"""Configuration management for Casa.

Reads configuration from ~/.config/casa.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass
from decimal import Decimal
import tomllib
import tomli_w


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    llm_enabled: bool = False
    llm_provider: str = "openai"
    llm_openai_api_key: str = ""
    llm_openai_model: str = "gpt-4o-mini"
    local_currency: str = "BRL"
    foreign_currency: str = "USD"
    fallback_exchange_rate: Decimal = Decimal("5.42")
    exchange_rate_cache_seconds: int = 3600
    settlement_split_ratio: Decimal = Decimal("1.0")
    settlement_reference_color: str = "blue"
    household_history_months: int = 6
    uncategorized_category: str = "Other"
    enable_reset: bool = False

    @property
    def db_path(self) -> Path:
        """Get the full database path (data_dir/filename)."""
        return self.db_data_dir / self.db_filename

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        home = Path.home()
        base_dir = home / "data" / "casa"
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename="casa.db",
            log_level="INFO",
            log_dir=base_dir / "logs",
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "casa.toml"


def get_migrations_dir() -> Path:
    """Get the path to the migrations directory.

    This is always relative to the code location, not configurable.
    """
    return Path(__file__).parent / "db" / "migrations"


def load_config() -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Returns:
        Config object with loaded or default values.
    """
    config_path = get_config_path()

    # If config doesn't exist, create it with defaults
    if not config_path.exists():
        config = Config.default()
        _write_config(config)
        return config

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    return config_from_dict(data)


def config_from_dict(data: dict) -> Config:
    """Build a Config from parsed TOML data, filling in defaults.

    Args:
        data: Parsed TOML document.

    Returns:
        Config object.
    """
    defaults = Config.default()
    base_dir = Path(data.get("base_dir", defaults.base_dir))

    db_config = data.get("database", {})
    db_data_dir = Path(db_config.get("data_dir", base_dir / "db"))
    db_filename = db_config.get("filename", defaults.db_filename)

    log_config = data.get("logging", {})
    log_level = log_config.get("level", defaults.log_level)
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    llm_config = data.get("llm", {})
    openai_config = llm_config.get("openai", {})

    currency_config = data.get("currency", {})

    # Decimals are stored as strings so 5.42 stays 5.42
    rate_config = data.get("exchange_rate", {})
    fallback_rate = Decimal(
        str(rate_config.get("fallback_rate", defaults.fallback_exchange_rate))
    )

    settlement_config = data.get("settlement", {})
    split_ratio = Decimal(
        str(settlement_config.get("split_ratio", defaults.settlement_split_ratio))
    )

    return Config(
        base_dir=base_dir,
        db_data_dir=db_data_dir,
        db_filename=db_filename,
        log_level=log_level,
        log_dir=log_dir,
        llm_enabled=llm_config.get("enabled", defaults.llm_enabled),
        llm_provider=llm_config.get("provider", defaults.llm_provider),
        llm_openai_api_key=openai_config.get("api_key", defaults.llm_openai_api_key),
        llm_openai_model=openai_config.get("model", defaults.llm_openai_model),
        local_currency=currency_config.get("local", defaults.local_currency),
        foreign_currency=currency_config.get("foreign", defaults.foreign_currency),
        fallback_exchange_rate=fallback_rate,
        exchange_rate_cache_seconds=rate_config.get(
            "cache_seconds", defaults.exchange_rate_cache_seconds
        ),
        settlement_split_ratio=split_ratio,
        settlement_reference_color=settlement_config.get(
            "reference_color", defaults.settlement_reference_color
        ),
        household_history_months=data.get("household", {}).get(
            "history_months", defaults.household_history_months
        ),
        uncategorized_category=data.get(
            "uncategorized_category", defaults.uncategorized_category
        ),
        enable_reset=data.get("enable_reset", defaults.enable_reset),
    )


def config_to_dict(config: Config) -> dict:
    """Convert a Config to the TOML document structure."""
    return {
        "base_dir": str(config.base_dir),
        "enable_reset": config.enable_reset,
        "uncategorized_category": config.uncategorized_category,
        "database": {
            "data_dir": str(config.db_data_dir),
            "filename": config.db_filename,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "llm": {
            "enabled": config.llm_enabled,
            "provider": config.llm_provider,
            "openai": {
                "api_key": config.llm_openai_api_key,
                "model": config.llm_openai_model,
            },
        },
        "currency": {
            "local": config.local_currency,
            "foreign": config.foreign_currency,
        },
        "exchange_rate": {
            "fallback_rate": str(config.fallback_exchange_rate),
            "cache_seconds": config.exchange_rate_cache_seconds,
        },
        "settlement": {
            "split_ratio": str(config.settlement_split_ratio),
            "reference_color": config.settlement_reference_color,
        },
        "household": {
            "history_months": config.household_history_months,
        },
    }


def _write_config(config: Config) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
    """
    config_path = get_config_path()

    # Ensure config directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config_to_dict(config), f)
