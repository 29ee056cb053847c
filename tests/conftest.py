"""Shared pytest fixtures for all tests."""

import pytest
from decimal import Decimal

from cli.migrate import apply_pending
from config import Config
from db.manager import DatabaseManager
from services.base import Services
from tests.helpers import FakeLLMProvider


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary database.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "casa",
        db_data_dir=tmp_path / "casa" / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=tmp_path / "casa" / "logs",
        llm_enabled=False,
        llm_provider="openai",
        llm_openai_api_key="",
        llm_openai_model="gpt-4o-mini",
        local_currency="BRL",
        foreign_currency="USD",
        fallback_exchange_rate=Decimal("5.42"),
        exchange_rate_cache_seconds=3600,
        settlement_split_ratio=Decimal("1.0"),
        settlement_reference_color="blue",
        uncategorized_category="Other",
        household_history_months=6,
    )


@pytest.fixture
def db_manager_with_schema(test_config):
    """DatabaseManager on a temporary SQLite file with every migration applied."""
    db_manager = DatabaseManager(test_config)
    apply_pending(db_manager)
    return db_manager


@pytest.fixture
def fake_llm():
    """A scripted LLM provider; tests set its return values."""
    return FakeLLMProvider()


@pytest.fixture
def services(test_config, db_manager_with_schema, fake_llm):
    """Create a Services container with test database and a fake LLM provider.

    Args:
        test_config: Test configuration fixture.
        db_manager_with_schema: Database manager with schema set up.
        fake_llm: Scripted LLM provider.

    Returns:
        Services: Services container for testing.
    """
    return Services(
        test_config, db_manager=db_manager_with_schema, llm_provider=fake_llm
    )


@pytest.fixture
def household(services):
    """Both participants (blue reference, pink counterpart) and two categories.

    Returns:
        dict with keys blue, pink, rent, groceries.
    """
    return {
        "blue": services.participants.create("Alex", "alex@example.com", "blue"),
        "pink": services.participants.create("Sam", "sam@example.com", "pink"),
        "rent": services.categories.create("Rent"),
        "groceries": services.categories.create("Groceries"),
    }
