"""SQLite connection handling for the household ledger."""

import sqlite3
from contextlib import contextmanager
from config import Config, get_migrations_dir

# Seconds a writer waits on a locked database before sqlite3 raises
BUSY_TIMEOUT = 5.0


def configure_connection(conn: sqlite3.Connection) -> sqlite3.Connection:
    """Enable foreign keys, which SQLite leaves off for every new connection.

    The schema relies on them for ON DELETE RESTRICT (categories) and
    ON DELETE SET NULL (template tags on expenses).
    """
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


class DatabaseManager:
    """Opens one short-lived connection per service call.

    Concurrent writers to the same (participant, category, month, year)
    tuple are serialized by SQLite's write lock; a second writer waits up to
    BUSY_TIMEOUT seconds instead of failing immediately.

    Args:
        config: Application configuration; supplies the database path.
    """

    def __init__(self, config: Config):
        self.config = config

    @contextmanager
    def connect(self):
        """Yield a configured connection and close it afterwards.

        Callers commit their own writes; anything uncommitted is discarded
        on close.
        """
        db_path = self.get_db_path()
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = configure_connection(sqlite3.connect(db_path, timeout=BUSY_TIMEOUT))
        try:
            yield conn
        finally:
            conn.close()

    def get_db_path(self):
        return self.config.db_path

    def get_migrations_dir(self):
        return get_migrations_dir()
