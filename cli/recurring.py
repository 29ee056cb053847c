#!/usr/bin/env python3

from datetime import date
from logger import get_logger
from money import format_money

logger = get_logger()


def cmd_list(args, services):
    """List recurring templates."""
    templates = services.recurring.find_all()

    if not templates:
        logger.info("No recurring templates found.")
        return

    logger.info("\nRecurring templates:")
    logger.info("=" * 80)
    for template in templates:
        months = template.covered_months()
        logger.info(
            f"{template.id:>4}  participant {template.participant_id}  "
            f"category {template.category_id}  {format_money(template.monthly_amount)}/month  "
            f"{template.start_date} .. {template.end_date} ({len(months)} months)"
        )


def cmd_create(args, services):
    """Create a template and write its monthly entries."""
    template = services.recurring.create(
        args.participant_id, args.category_id, args.amount, args.start_date, args.end_date
    )
    logger.info(
        f"✓ Template {template.id} created for {len(template.covered_months())} month(s)"
    )


def cmd_update(args, services):
    """Replace a template and rewrite its entries."""
    template = services.recurring.update(
        args.template_id,
        args.participant_id,
        args.category_id,
        args.amount,
        args.start_date,
        args.end_date,
    )
    logger.info(
        f"✓ Template {template.id} updated, now covering "
        f"{len(template.covered_months())} month(s)"
    )


def cmd_delete(args, services):
    """Delete a template and its entries."""
    removed = services.recurring.delete(args.template_id)
    logger.info(f"✓ Template {args.template_id} deleted ({removed} entries removed)")


def _add_template_arguments(parser):
    parser.add_argument("participant_id", type=int)
    parser.add_argument("category_id", type=int)
    parser.add_argument("amount", help="Monthly amount in local currency")
    parser.add_argument("start_date", type=date.fromisoformat, help="YYYY-MM-DD")
    parser.add_argument("end_date", type=date.fromisoformat, help="YYYY-MM-DD")


def setup_parser(subparsers):
    """Setup recurring subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "recurring",
        help="Manage recurring debts",
        description="Templates that apply a monthly amount over a date range",
    )

    recurring_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available recurring commands",
        dest="subcommand",
        required=True,
    )

    list_parser = recurring_subparsers.add_parser("list", help="List templates")
    list_parser.set_defaults(func=cmd_list)

    create_parser = recurring_subparsers.add_parser("create", help="Create a template")
    _add_template_arguments(create_parser)
    create_parser.set_defaults(func=cmd_create)

    update_parser = recurring_subparsers.add_parser("update", help="Replace a template")
    update_parser.add_argument("template_id", type=int)
    _add_template_arguments(update_parser)
    update_parser.set_defaults(func=cmd_update)

    delete_parser = recurring_subparsers.add_parser(
        "delete", help="Delete a template and its entries"
    )
    delete_parser.add_argument("template_id", type=int)
    delete_parser.set_defaults(func=cmd_delete)
