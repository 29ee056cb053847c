#!/usr/bin/env python3

from datetime import date
from logger import get_logger
from money import format_money

logger = get_logger()


def cmd_show(args, services):
    """Show a participant's salary profile."""
    profile = services.salary_profiles.get_by_participant(args.participant_id)
    logger.info(f"Participant {profile.participant_id}: {profile.role} earner")
    if profile.fixed_amount is not None:
        logger.info(f"  Monthly salary: {format_money(profile.fixed_amount, profile.currency)}")
    if profile.hourly_rate is not None:
        logger.info(f"  Hourly rate: {format_money(profile.hourly_rate, profile.currency)}")


def cmd_set(args, services):
    """Create or replace a participant's salary profile."""
    profile = services.salary_profiles.upsert(
        args.participant_id,
        fixed_amount=args.fixed,
        hourly_rate=args.hourly,
        currency=args.currency,
    )
    logger.info(f"✓ Saved {profile.role} salary profile for participant {profile.participant_id}")


def _print_month(report):
    logger.info(
        f"{str(report.payment_month):<8} {str(report.working_month):<8} "
        f"{report.working_days:>4} {report.total_hours:>6} "
        f"{format_money(report.gross_foreign):>12} {format_money(report.gross_local):>12} "
        f"{format_money(report.deductions):>11} {format_money(report.debt):>11} "
        f"{format_money(report.net_local):>12}"
    )


def _print_header():
    logger.info(
        f"{'Paid':<8} {'Worked':<8} {'Days':>4} {'Hours':>6} {'Gross FX':>12} "
        f"{'Gross':>12} {'Deductions':>11} {'Debt':>11} {'Net':>12}"
    )
    logger.info("-" * 92)


def cmd_report(args, services):
    """Show a variable earner's salary report for a month or a whole year."""
    calculator = services.settlement

    if args.month:
        report = calculator.compute_monthly_salary_report(
            args.participant_id, args.month, args.year, exchange_rate=args.rate
        )
        logger.info(
            f"\nSalary report {report.payment_month} "
            f"({format_money(report.hourly_rate, report.currency)}/h, "
            f"rate {report.exchange_rate})"
        )
        _print_header()
        _print_month(report)
        return

    annual = calculator.compute_annual_salary_report(
        args.participant_id,
        args.year,
        exchange_rate=args.rate,
        per_month_rates=args.per_month_rates,
    )
    rates = "recorded rates, else " if annual.per_month_rates else ""
    logger.info(
        f"\nAnnual salary report {annual.year} "
        f"({format_money(annual.hourly_rate, annual.currency)}/h, "
        f"{rates}rate {annual.exchange_rate})"
    )
    _print_header()
    for report in annual.months:
        _print_month(report)
    logger.info("-" * 92)
    logger.info(
        f"{'Total':<17} {annual.total_working_days:>4} {annual.total_hours:>6} "
        f"{format_money(annual.total_gross_foreign):>12} "
        f"{format_money(annual.total_gross_local):>12} "
        f"{format_money(annual.total_deductions):>11} "
        f"{format_money(annual.total_debt):>11} "
        f"{format_money(annual.total_net_local):>12}"
    )


def setup_parser(subparsers):
    """Setup salaries subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "salaries",
        help="Salary profiles and reports",
        description="Configure salaries and compute variable earners' net pay",
    )

    salaries_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available salary commands",
        dest="subcommand",
        required=True,
    )

    show_parser = salaries_subparsers.add_parser("show", help="Show a salary profile")
    show_parser.add_argument("participant_id", type=int)
    show_parser.set_defaults(func=cmd_show)

    set_parser = salaries_subparsers.add_parser("set", help="Set a salary profile")
    set_parser.add_argument("participant_id", type=int)
    amount_group = set_parser.add_mutually_exclusive_group(required=True)
    amount_group.add_argument("--fixed", help="Monthly salary in local currency")
    amount_group.add_argument("--hourly", help="Hourly rate in foreign currency")
    set_parser.add_argument("--currency", help="Currency of the hourly rate")
    set_parser.set_defaults(func=cmd_set)

    report_parser = salaries_subparsers.add_parser(
        "report", help="Salary report for a payment month, or a whole year"
    )
    report_parser.add_argument("participant_id", type=int)
    report_parser.add_argument("--year", type=int, default=date.today().year)
    report_parser.add_argument(
        "--month", type=int, help="Payment month (1-12); omit for the annual report"
    )
    report_parser.add_argument(
        "--rate", help="Exchange rate to use instead of looking one up"
    )
    report_parser.add_argument(
        "--per-month-rates",
        action="store_true",
        help="Annual report: use each month's recorded conversion rate where one exists",
    )
    report_parser.set_defaults(func=cmd_report)
