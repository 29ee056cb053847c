#!/usr/bin/env python3
"""
Casa CLI - Command-line interface for the household settlement engine.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    participants Manage the two household participants
    categories   Manage expense categories
    expenses     Record and query the monthly expense ledger
    recurring    Manage recurring debt templates
    salaries     Salary profiles and salary reports
    conversions  Record salary currency conversions
    household    Household income against expenses
    deductions   Manage deductions (boletos)
    settlement   Who owes whom for a month or a year
    rates        Look up exchange rates
    extract      Extract transactions or a boleto from a document
    migrate      Database migrations

Examples:
    python -m cli participants create
    python -m cli expenses set 1 2 1200.50 --month 3 --year 2025
    python -m cli recurring create 1 2 500 2025-01-01 2025-03-31
    python -m cli settlement show --year 2025 --month 3
    python -m cli salaries report 2 --year 2025 --month 3
    python -m cli household show --year 2025 --month 3
    python -m cli migrate apply
"""

import sys
import argparse
from cli import (
    participants,
    categories,
    expenses,
    recurring,
    salaries,
    conversions,
    household,
    deductions,
    settlement,
    rates,
    extract,
    migrate,
)
from config import load_config
from errors import CasaError
from services.base import Services
from db.manager import DatabaseManager
from logger import get_logger, setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Casa - Shared household expenses and settlement",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    for module in (
        participants,
        categories,
        expenses,
        recurring,
        salaries,
        conversions,
        household,
        deductions,
        settlement,
        rates,
        extract,
        migrate,
    ):
        module.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            # Migrate commands need db_manager for raw database operations
            if args.command == "migrate":
                args.func(args, DatabaseManager(config))
            else:
                args.func(args, Services(config))
        except CasaError as e:
            get_logger().error(f"Error: {e}")
            sys.exit(1)
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
