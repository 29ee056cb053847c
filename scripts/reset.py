#!/usr/bin/env python3
"""Reset script for Casa.

Deletes the data directory (database and logs) and re-applies the migrations
to an empty database. Only runs when enable_reset is true in the config.
"""

import shutil
import sys

from config import get_config_path, load_config
from db.manager import DatabaseManager
from cli.migrate import apply_pending


def reset():
    """Wipe all household data and recreate the schema."""
    print("Casa Reset Script")
    print("=" * 50)

    config = load_config()

    if not config.enable_reset:
        print("\nReset is disabled in configuration (enable_reset=false).")
        print(f"To enable reset, set enable_reset=true in {get_config_path()}")
        sys.exit(1)

    print(f"\nData directory: {config.base_dir}")
    print(f"Database: {config.db_path}")
    print(f"Logs: {config.log_dir}")

    response = input(
        "\nThis deletes every participant, expense, template and deduction. "
        "Continue? (yes/no): "
    )
    if response.strip().lower() != "yes":
        print("Reset cancelled.")
        sys.exit(0)

    for directory in {config.base_dir, config.db_data_dir, config.log_dir}:
        if directory.exists():
            print(f"Deleting {directory}...")
            shutil.rmtree(directory)

    print("\nRunning migrations...")
    applied = apply_pending(DatabaseManager(config))

    print("\n" + "=" * 50)
    print(f"Reset complete! Applied {len(applied)} migration(s).")
    print(f"Database location: {config.db_path}")


if __name__ == "__main__":
    reset()
