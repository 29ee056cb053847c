#!/usr/bin/env python3

from datetime import date
from logger import get_logger
from money import format_money

logger = get_logger()


def cmd_list(args, services):
    """List a participant's deductions for a month."""
    deductions = services.deductions.list_deductions(
        args.participant_id, args.month, args.year
    )

    if not deductions:
        logger.info("No deductions found.")
        return

    for deduction in deductions:
        logger.info(
            f"{deduction.id:>4}  {deduction.due_date}  {deduction.description:<40} "
            f"{format_money(deduction.amount):>12}"
        )
    total = services.deductions.sum_deductions(args.participant_id, args.month, args.year)
    logger.info(f"Total: {format_money(total, services.config.local_currency)}")


def cmd_add(args, services):
    """Add a deduction."""
    deduction = services.deductions.create(
        args.participant_id,
        args.description,
        args.amount,
        args.due_date,
        month=args.month,
        year=args.year,
    )
    logger.info(
        f"✓ Deduction {deduction.id} added to {deduction.year:04d}/{deduction.month:02d}"
    )


def cmd_delete(args, services):
    """Delete a deduction by ID."""
    services.deductions.delete(args.deduction_id)
    logger.info(f"✓ Deduction {args.deduction_id} deleted")


def setup_parser(subparsers):
    """Setup deductions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "deductions",
        help="Manage deductions",
        description="Boletos and other one-off charges against a participant's income",
    )

    deductions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available deduction commands",
        dest="subcommand",
        required=True,
    )

    today = date.today()

    list_parser = deductions_subparsers.add_parser("list", help="List deductions")
    list_parser.add_argument("participant_id", type=int)
    list_parser.add_argument("--month", type=int, default=today.month)
    list_parser.add_argument("--year", type=int, default=today.year)
    list_parser.set_defaults(func=cmd_list)

    add_parser = deductions_subparsers.add_parser("add", help="Add a deduction")
    add_parser.add_argument("participant_id", type=int)
    add_parser.add_argument("description")
    add_parser.add_argument("amount", help="Amount in local currency")
    add_parser.add_argument("due_date", type=date.fromisoformat, help="YYYY-MM-DD")
    add_parser.add_argument("--month", type=int, help="Defaults to the due date's month")
    add_parser.add_argument("--year", type=int, help="Defaults to the due date's year")
    add_parser.set_defaults(func=cmd_add)

    delete_parser = deductions_subparsers.add_parser("delete", help="Delete a deduction")
    delete_parser.add_argument("deduction_id", type=int)
    delete_parser.set_defaults(func=cmd_delete)
