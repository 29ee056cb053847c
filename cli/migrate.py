#!/usr/bin/env python3

from typing import List
from logger import get_logger

logger = get_logger()

_MIGRATIONS_TABLE = """
    CREATE TABLE IF NOT EXISTS schema_migrations (
        migration_file TEXT PRIMARY KEY,
        applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
"""


def applied_migrations(conn) -> set:
    """Names of the migrations recorded in schema_migrations."""
    conn.execute(_MIGRATIONS_TABLE)
    cursor = conn.execute("SELECT migration_file FROM schema_migrations")
    return {row[0] for row in cursor.fetchall()}


def available_migrations(db_manager) -> List[str]:
    """Migration file names in apply order."""
    migrations_dir = db_manager.get_migrations_dir()
    if not migrations_dir.exists():
        return []
    return sorted(path.name for path in migrations_dir.glob("*.sql"))


def apply_pending(db_manager) -> List[str]:
    """Apply every migration not yet recorded, in name order.

    Returns:
        Names of the migrations applied by this call.

    Raises:
        sqlite3.Error: If a migration fails; it is rolled back and later
            migrations are not attempted.
    """
    migrations_dir = db_manager.get_migrations_dir()
    applied = []

    with db_manager.connect() as conn:
        done = applied_migrations(conn)
        conn.commit()

        for name in available_migrations(db_manager):
            if name in done:
                continue

            sql = (migrations_dir / name).read_text(encoding="utf-8")
            try:
                conn.executescript(sql)
                conn.execute(
                    "INSERT INTO schema_migrations (migration_file) VALUES (?)", (name,)
                )
                conn.commit()
            except Exception as e:
                conn.rollback()
                logger.error(f"Error applying migration {name}: {e}")
                raise

            logger.info(f"Applied migration: {name}")
            applied.append(name)

    return applied


def cmd_status(args, db_manager):
    """Show migration status."""
    if not db_manager.get_db_path().exists():
        logger.info(
            "Database does not exist. Run 'python -m cli migrate apply' to create it."
        )
        return

    available = available_migrations(db_manager)
    if not available:
        logger.info("No migrations found.")
        return

    with db_manager.connect() as conn:
        applied = applied_migrations(conn)
        conn.commit()

    logger.info("Migration Status:")
    logger.info("================")
    for name in available:
        logger.info(f"{name}: {'APPLIED' if name in applied else 'PENDING'}")

    pending = [name for name in available if name not in applied]
    logger.info(f"\nTotal migrations: {len(available)}")
    logger.info(f"Applied: {len(available) - len(pending)}")
    logger.info(f"Pending: {len(pending)}")


def cmd_apply(args, db_manager):
    """Apply pending migrations."""
    applied = apply_pending(db_manager)
    if applied:
        logger.info(f"Successfully applied {len(applied)} migration(s).")
    else:
        logger.info("No pending migrations.")


def setup_parser(subparsers):
    """Setup migrate subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "migrate",
        help="Database migrations",
        description="Manage database schema migrations",
    )

    migrate_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available migration commands",
        dest="subcommand",
        required=True,
    )

    status_parser = migrate_subparsers.add_parser(
        "status", help="Show migration status"
    )
    status_parser.set_defaults(func=cmd_status)

    apply_parser = migrate_subparsers.add_parser(
        "apply", help="Apply pending migrations"
    )
    apply_parser.set_defaults(func=cmd_apply)
