"""Household income analysis: combined net income against the month's expenses."""

from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple

from logger import get_logger
from models.household import (
    BUDGET_ATTENTION,
    BUDGET_CRITICAL,
    BUDGET_EXCELLENT,
    BUDGET_GOOD,
    STABILITY_MODERATE,
    STABILITY_STABLE,
    STABILITY_VOLATILE,
    HouseholdIncomeAnalysis,
    MonthlyIncome,
)
from models.period import MonthKey
from models.salary_profile import ROLE_FIXED
from money import CENTS, ZERO, quantize

logger = get_logger()

HUNDRED = Decimal("100")
NEUTRAL_STABILITY = Decimal("50.0")
# A coefficient of variation of 0.3 or more scores zero
CV_PENALTY = Decimal("333.33")


def percentage(part: Decimal, whole: Decimal) -> Decimal:
    """``part`` as a percentage of ``whole``, 2 places; zero when whole is zero."""
    if whole == 0:
        return ZERO
    ratio = (part / whole).quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)
    return (ratio * HUNDRED).quantize(CENTS, rounding=ROUND_HALF_UP)


def stability_score(history: List[MonthlyIncome]) -> Decimal:
    """Score 0-100 for how steady the household income has been.

    Derived from the coefficient of variation of the months with a positive
    income. Fewer than two months of history give the neutral score 50.
    """
    incomes = [m.total_income for m in history if m.total_income > 0]
    if len(history) < 2 or not incomes:
        return NEUTRAL_STABILITY

    count = Decimal(len(incomes))
    mean = quantize(sum(incomes, ZERO) / count)
    variance = quantize(sum(((i - mean) ** 2 for i in incomes), ZERO) / count)
    cv = variance.sqrt() / mean if mean > 0 else ZERO

    score = max(ZERO, min(HUNDRED, HUNDRED - cv * CV_PENALTY))
    return score.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def stability_status(score: Decimal) -> str:
    if score >= 70:
        return STABILITY_STABLE
    if score >= 40:
        return STABILITY_MODERATE
    return STABILITY_VOLATILE


def budget_status(expense_ratio: Decimal, savings_rate: Decimal) -> str:
    if expense_ratio > 100:
        return BUDGET_CRITICAL
    if savings_rate < 10:
        return BUDGET_ATTENTION
    if savings_rate < 20:
        return BUDGET_GOOD
    return BUDGET_EXCELLENT


class HouseholdIncomeService:
    """Combines both salaries with the expense ledger for a month.

    Fixed salaries count at their monthly amount. The variable earner counts
    at the net pay of their salary report, so deductions and the monthly
    settlement debt are already taken out. A participant without a salary
    profile contributes nothing.

    Args:
        participants: ParticipantService.
        salary_profiles: SalaryProfileService.
        expenses: ExpenseLedger.
        settlement: SettlementCalculator producing the salary reports.
        history_months: Number of months before the analysed one to include.
    """

    def __init__(self, participants, salary_profiles, expenses, settlement, history_months=6):
        self.participants = participants
        self.salary_profiles = salary_profiles
        self.expenses = expenses
        self.settlement = settlement
        self.history_months = history_months

    def analyze(self, month: int, year: int, exchange_rate=None) -> HouseholdIncomeAnalysis:
        """Analyse a month's household income, savings and budget health.

        Args:
            month: Month (1-12).
            year: Four-digit year.
            exchange_rate: Explicit rate for the variable earner's pay, or
                None for the recorded conversion or the exchange-rate source.

        Returns:
            HouseholdIncomeAnalysis for the month, with its history window.

        Raises:
            ValidationError: If the period is invalid.
        """
        period = MonthKey(year, month)
        fixed, gross, net, rate = self._income(period, exchange_rate)
        total_income = quantize(fixed + net)
        total_expenses = self.expenses.total_by_month(year, month)
        savings = quantize(total_income - total_expenses)
        savings_rate = percentage(savings, total_income)
        expense_ratio = percentage(total_expenses, total_income)

        history = [
            self._monthly_income(period.shift(-offset), exchange_rate)
            for offset in range(self.history_months, 0, -1)
        ]
        score = stability_score(history)

        logger.info(
            f"Household {period}: income {total_income}, expenses {total_expenses}, "
            f"savings {savings} ({savings_rate}%)"
        )

        return HouseholdIncomeAnalysis(
            period=period,
            fixed_income=fixed,
            variable_gross_income=gross,
            variable_net_income=net,
            total_income=total_income,
            total_expenses=total_expenses,
            savings=savings,
            savings_rate=savings_rate,
            expense_ratio=expense_ratio,
            stability_score=score,
            stability_status=stability_status(score),
            budget_status=budget_status(expense_ratio, savings_rate),
            history=history,
            exchange_rate=rate,
        )

    def _monthly_income(self, period: MonthKey, exchange_rate) -> MonthlyIncome:
        fixed, _, net, _ = self._income(period, exchange_rate)
        total_income = quantize(fixed + net)
        expenses = self.expenses.total_by_month(period.year, period.month)
        return MonthlyIncome(
            period=period,
            fixed_income=fixed,
            variable_net_income=net,
            total_income=total_income,
            expenses=expenses,
            savings=quantize(total_income - expenses),
        )

    def _income(
        self, period: MonthKey, exchange_rate
    ) -> Tuple[Decimal, Decimal, Decimal, Optional[Decimal]]:
        fixed = gross = net = ZERO
        rate = None
        for participant in self.participants.find_all():
            profile = self.salary_profiles.find_by_participant(participant.id)
            if profile is None:
                logger.warning(f"{participant.name} has no salary profile; counting no income")
                continue

            if profile.role == ROLE_FIXED:
                fixed += profile.income_model.amount
                continue

            report = self.settlement.compute_monthly_salary_report(
                participant.id, period.month, period.year, exchange_rate
            )
            gross += report.gross_local
            net += report.net_local
            rate = report.exchange_rate

        return quantize(fixed), quantize(gross), quantize(net), rate
