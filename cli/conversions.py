#!/usr/bin/env python3

from datetime import date
from logger import get_logger
from money import format_money

logger = get_logger()


def cmd_list(args, services):
    """List a participant's recorded conversions for a year."""
    conversions = services.conversions.list_conversions(args.participant_id, args.year)

    if not conversions:
        logger.info("No conversions recorded.")
        return

    local = services.config.local_currency
    foreign = services.config.foreign_currency
    logger.info(
        f"{'ID':>4}  {'Month':<8} {'Date':<10} {'Rate':>10} {'VET':>10} "
        f"{foreign:>12} {local:>12}"
    )
    logger.info("-" * 74)
    for conversion in conversions:
        logger.info(
            f"{conversion.id:>4}  {str(conversion.period):<8} {conversion.conversion_date} "
            f"{conversion.exchange_rate:>10} {conversion.vet:>10} "
            f"{format_money(conversion.foreign_amount):>12} "
            f"{format_money(conversion.final_local_amount):>12}"
        )


def cmd_show(args, services):
    """Show the conversion recorded for one payment month."""
    conversion = services.conversions.find_by_month(args.participant_id, args.month, args.year)
    if conversion is None:
        logger.info(f"No conversion recorded for {args.year:04d}/{args.month:02d}.")
        return

    logger.info(f"\nConversion {conversion.period} (recorded {conversion.conversion_date})")
    logger.info("=" * 60)
    logger.info(f"  Rate:        {conversion.exchange_rate}")
    logger.info(f"  VET:         {conversion.vet}")
    logger.info(
        f"  Withdrawn:   {format_money(conversion.foreign_amount, services.config.foreign_currency)}"
    )
    logger.info(
        f"  Credited:    "
        f"{format_money(conversion.final_local_amount, services.config.local_currency)}"
    )


def cmd_set(args, services):
    """Record the conversion for a payment month, replacing any earlier one."""
    conversion = services.conversions.upsert(
        args.participant_id,
        args.month,
        args.year,
        args.conversion_date,
        args.rate,
        args.foreign_amount,
        args.vet,
        args.local_amount,
    )
    logger.info(f"✓ Conversion {conversion.id} recorded for {conversion.period}")


def cmd_delete(args, services):
    """Delete a recorded conversion by ID."""
    services.conversions.delete(args.conversion_id)
    logger.info(f"✓ Conversion {args.conversion_id} deleted")


def setup_parser(subparsers):
    """Setup conversions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "conversions",
        help="Record salary currency conversions",
        description="Conversions of foreign-currency pay that actually happened",
    )

    conversions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available conversion commands",
        dest="subcommand",
        required=True,
    )

    today = date.today()

    list_parser = conversions_subparsers.add_parser("list", help="List conversions of a year")
    list_parser.add_argument("participant_id", type=int)
    list_parser.add_argument("--year", type=int, default=today.year)
    list_parser.set_defaults(func=cmd_list)

    show_parser = conversions_subparsers.add_parser("show", help="Show a month's conversion")
    show_parser.add_argument("participant_id", type=int)
    show_parser.add_argument("--month", type=int, default=today.month)
    show_parser.add_argument("--year", type=int, default=today.year)
    show_parser.set_defaults(func=cmd_show)

    set_parser = conversions_subparsers.add_parser("set", help="Record a month's conversion")
    set_parser.add_argument("participant_id", type=int)
    set_parser.add_argument("conversion_date", type=date.fromisoformat, help="YYYY-MM-DD")
    set_parser.add_argument("--month", type=int, required=True, help="Payment month")
    set_parser.add_argument("--year", type=int, required=True, help="Payment year")
    set_parser.add_argument("--rate", required=True, help="Quoted exchange rate")
    set_parser.add_argument("--vet", required=True, help="Effective rate after fees")
    set_parser.add_argument("--foreign-amount", required=True, help="Amount withdrawn")
    set_parser.add_argument("--local-amount", required=True, help="Amount credited")
    set_parser.set_defaults(func=cmd_set)

    delete_parser = conversions_subparsers.add_parser("delete", help="Delete a conversion")
    delete_parser.add_argument("conversion_id", type=int)
    delete_parser.set_defaults(func=cmd_delete)
