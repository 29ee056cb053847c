#!/usr/bin/env python3

from datetime import date
from logger import get_logger
from money import format_money

logger = get_logger()


def _describe(settlement, names, currency):
    if settlement.debtor_id is None:
        return "even"
    return (
        f"{names.get(settlement.debtor_id, '?')} owes "
        f"{names.get(settlement.creditor_id, '?')} "
        f"{format_money(settlement.amount_owed, currency)}"
    )


def cmd_show(args, services):
    """Show one month's settlement."""
    names = {p.id: p.name for p in services.participants.find_all()}
    currency = services.config.local_currency
    settlement = services.settlement.compute_monthly_settlement(
        args.year, args.month, args.reference
    )

    logger.info(f"\nSettlement {settlement.period}")
    logger.info("=" * 60)
    for participant_id, total in settlement.totals.items():
        logger.info(f"  {names.get(participant_id, '?'):<20} paid {format_money(total, currency)}")
    logger.info(f"  Split ratio: {settlement.split_ratio}")
    logger.info(f"  {_describe(settlement, names, currency)}")


def cmd_annual(args, services):
    """Show the settlement of every month of a year."""
    names = {p.id: p.name for p in services.participants.find_all()}
    currency = services.config.local_currency
    annual = services.settlement.compute_annual_settlement(args.year, args.reference)

    reference = names.get(annual.reference_participant_id, "?")
    logger.info(f"\nSettlements {annual.year} (positive: {reference} owes)")
    logger.info("=" * 60)
    for settlement in annual.months:
        logger.info(
            f"  {str(settlement.period):<8} {format_money(settlement.debt):>14}  "
            f"{_describe(settlement, names, currency)}"
        )
    logger.info("-" * 60)
    logger.info(f"  {'Total':<8} {format_money(annual.total_debt):>14}")


def setup_parser(subparsers):
    """Setup settlement subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "settlement",
        help="Who owes whom",
        description="Monthly and annual debt between the two participants",
    )

    settlement_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available settlement commands",
        dest="subcommand",
        required=True,
    )

    today = date.today()

    show_parser = settlement_subparsers.add_parser("show", help="One month")
    show_parser.add_argument("--year", type=int, default=today.year)
    show_parser.add_argument("--month", type=int, default=today.month)
    show_parser.add_argument(
        "--reference", type=int, help="Reference participant ID (default: by color)"
    )
    show_parser.set_defaults(func=cmd_show)

    annual_parser = settlement_subparsers.add_parser("annual", help="Every month of a year")
    annual_parser.add_argument("--year", type=int, default=today.year)
    annual_parser.add_argument(
        "--reference", type=int, help="Reference participant ID (default: by color)"
    )
    annual_parser.set_defaults(func=cmd_annual)
