import sqlite3
import pytest

from cli.migrate import applied_migrations, apply_pending, available_migrations
from db.manager import DatabaseManager


class TestMigrations:
    """Tests for the migration runner."""

    def test_apply_pending_once(self, test_config):
        """Test that migrations are applied once and recorded."""
        db_manager = DatabaseManager(test_config)

        first = apply_pending(db_manager)
        second = apply_pending(db_manager)

        assert first == available_migrations(db_manager)
        assert "001_initial_schema.sql" in first
        assert second == []
        with db_manager.connect() as conn:
            assert applied_migrations(conn) == set(first)

    def test_connections_enforce_foreign_keys(self, db_manager_with_schema):
        """Test that every connection rejects dangling references."""
        with db_manager_with_schema.connect() as conn:
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute(
                    "INSERT INTO expenses (participant_id, category_id, amount, month, year) "
                    "VALUES (99, 99, 1.0, 1, 2025)"
                )

    def test_schema_rejects_duplicate_tuple(self, services, household):
        """Test the UNIQUE index behind the one-entry-per-tuple rule."""
        services.expenses.upsert_expense(
            household["blue"].id, household["rent"].id, "10", 3, 2025
        )

        with services.db_manager.connect() as conn:
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute(
                    "INSERT INTO expenses (participant_id, category_id, amount, month, year) "
                    "VALUES (?, ?, 5.0, 3, 2025)",
                    (household["blue"].id, household["rent"].id),
                )
