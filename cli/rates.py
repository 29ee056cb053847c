#!/usr/bin/env python3

from logger import get_logger

logger = get_logger()


def cmd_show(args, services):
    """Show the current exchange rate."""
    base = args.base or services.config.foreign_currency
    quote = args.quote or services.config.local_currency
    rate = services.exchange_rates.get_rate(base, quote)
    logger.info(f"1 {base.upper()} = {rate} {quote.upper()}")


def setup_parser(subparsers):
    """Setup rates subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "rates",
        help="Exchange rates",
        description="Look up the exchange rate used by salary reports",
    )

    rates_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available rate commands",
        dest="subcommand",
        required=True,
    )

    show_parser = rates_subparsers.add_parser("show", help="Show the current rate")
    show_parser.add_argument("--base", help="Source currency (default: foreign currency)")
    show_parser.add_argument("--quote", help="Target currency (default: local currency)")
    show_parser.set_defaults(func=cmd_show)
