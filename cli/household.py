#!/usr/bin/env python3

from datetime import date
from logger import get_logger
from money import format_money

logger = get_logger()


def cmd_show(args, services):
    """Show a month's household income against its expenses."""
    currency = services.config.local_currency
    analysis = services.household.analyze(args.month, args.year, exchange_rate=args.rate)

    logger.info(f"\nHousehold income {analysis.period}")
    logger.info("=" * 60)
    logger.info(f"  Fixed income:        {format_money(analysis.fixed_income, currency)}")
    logger.info(f"  Variable (gross):    {format_money(analysis.variable_gross_income, currency)}")
    logger.info(f"  Variable (net):      {format_money(analysis.variable_net_income, currency)}")
    if analysis.exchange_rate is not None:
        logger.info(f"  Exchange rate:       {analysis.exchange_rate}")
    logger.info(f"  Total income:        {format_money(analysis.total_income, currency)}")
    logger.info(f"  Expenses:            {format_money(analysis.total_expenses, currency)}")
    logger.info(f"  Savings:             {format_money(analysis.savings, currency)}")
    logger.info(f"  Savings rate:        {analysis.savings_rate}%")
    logger.info(f"  Expense/income:      {analysis.expense_ratio}%")
    logger.info(f"  Budget:              {analysis.budget_status}")
    logger.info(
        f"  Income stability:    {analysis.stability_score} ({analysis.stability_status})"
    )

    if analysis.history:
        logger.info(f"\n{'Month':<8} {'Income':>14} {'Expenses':>14} {'Savings':>14}")
        logger.info("-" * 53)
        for month in analysis.history:
            logger.info(
                f"{str(month.period):<8} {format_money(month.total_income):>14} "
                f"{format_money(month.expenses):>14} {format_money(month.savings):>14}"
            )


def setup_parser(subparsers):
    """Setup household subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "household",
        help="Household income analysis",
        description="Both incomes against the month's shared expenses",
    )

    household_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available household commands",
        dest="subcommand",
        required=True,
    )

    today = date.today()

    show_parser = household_subparsers.add_parser("show", help="Analyse one month")
    show_parser.add_argument("--month", type=int, default=today.month)
    show_parser.add_argument("--year", type=int, default=today.year)
    show_parser.add_argument(
        "--rate", help="Exchange rate to use instead of the recorded or looked-up one"
    )
    show_parser.set_defaults(func=cmd_show)
