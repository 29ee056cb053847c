#!/usr/bin/env python3

from datetime import date
from logger import get_logger
from money import format_money

logger = get_logger()


def _names(services):
    participants = {p.id: p.name for p in services.participants.find_all()}
    categories = {c.id: c.name for c in services.categories.find_all()}
    return participants, categories


def cmd_list(args, services):
    """List ledger entries for a year or a month."""
    entries = services.expenses.list_expenses(args.year, args.month)

    if not entries:
        logger.info("No expenses found.")
        return

    participants, categories = _names(services)
    currency = services.config.local_currency

    logger.info(f"\n{'ID':<6} {'Month':<8} {'Participant':<16} {'Category':<30} {'Amount':>14}")
    logger.info("-" * 80)
    for entry in entries:
        marker = " (R)" if entry.recurring_template_id else ""
        logger.info(
            f"{entry.id:<6} {str(entry.period):<8} "
            f"{participants.get(entry.participant_id, '?'):<16} "
            f"{categories.get(entry.category_id, '?'):<30} "
            f"{format_money(entry.amount):>14}{marker}"
        )

    total = (
        services.expenses.total_by_month(args.year, args.month)
        if args.month
        else services.expenses.grand_total(args.year)
    )
    logger.info("-" * 80)
    logger.info(f"Total: {format_money(total, currency)} ({len(entries)} entries)")


def cmd_set(args, services):
    """Set the amount for a (participant, category, month, year) tuple."""
    entry = services.expenses.upsert_expense(
        args.participant_id, args.category_id, args.amount, args.month, args.year
    )
    if entry is None:
        logger.info(f"✓ Entry for {args.year:04d}/{args.month:02d} cleared")
    else:
        logger.info(f"✓ Entry {entry.id} set to {format_money(entry.amount)}")


def cmd_delete(args, services):
    """Delete a ledger entry by ID."""
    services.expenses.delete_expense(args.expense_id)
    logger.info(f"✓ Expense {args.expense_id} deleted")


def cmd_totals(args, services):
    """Show per-participant totals for a month."""
    participants, _ = _names(services)
    totals = services.expenses.totals_by_participant(
        args.year, args.month, list(participants)
    )
    currency = services.config.local_currency

    logger.info(f"\nTotals for {args.year:04d}/{args.month:02d}:")
    for participant_id, total in totals.items():
        logger.info(f"  {participants.get(participant_id, '?'):<20} {format_money(total, currency)}")
    logger.info(f"  {'Household':<20} {format_money(sum(totals.values()), currency)}")


def setup_parser(subparsers):
    """Setup expenses subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "expenses",
        help="Manage the expense ledger",
        description="Record what each participant paid per category and month",
    )

    expenses_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available expense commands",
        dest="subcommand",
        required=True,
    )

    today = date.today()

    list_parser = expenses_subparsers.add_parser("list", help="List ledger entries")
    list_parser.add_argument("--year", type=int, default=today.year)
    list_parser.add_argument("--month", type=int, help="Only this month (1-12)")
    list_parser.set_defaults(func=cmd_list)

    set_parser = expenses_subparsers.add_parser(
        "set", help="Create or replace an entry (amount 0 clears it)"
    )
    set_parser.add_argument("participant_id", type=int)
    set_parser.add_argument("category_id", type=int)
    set_parser.add_argument("amount", help="Amount in local currency")
    set_parser.add_argument("--month", type=int, default=today.month)
    set_parser.add_argument("--year", type=int, default=today.year)
    set_parser.set_defaults(func=cmd_set)

    delete_parser = expenses_subparsers.add_parser("delete", help="Delete an entry by ID")
    delete_parser.add_argument("expense_id", type=int)
    delete_parser.set_defaults(func=cmd_delete)

    totals_parser = expenses_subparsers.add_parser(
        "totals", help="Per-participant totals for a month"
    )
    totals_parser.add_argument("--month", type=int, default=today.month)
    totals_parser.add_argument("--year", type=int, default=today.year)
    totals_parser.set_defaults(func=cmd_totals)
