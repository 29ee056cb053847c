"""Household income analysis results. Derived on demand, never persisted."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from models.period import MonthKey

BUDGET_CRITICAL = "critical"
BUDGET_ATTENTION = "attention"
BUDGET_GOOD = "good"
BUDGET_EXCELLENT = "excellent"

STABILITY_STABLE = "stable"
STABILITY_MODERATE = "moderate"
STABILITY_VOLATILE = "volatile"


@dataclass
class MonthlyIncome:
    """Income against expenses for one month of the history window."""

    period: MonthKey
    fixed_income: Decimal
    variable_net_income: Decimal
    total_income: Decimal
    expenses: Decimal
    savings: Decimal


@dataclass
class HouseholdIncomeAnalysis:
    """The household's combined income against its expenses for a month.

    Attributes:
        period: Analysed month.
        fixed_income: Fixed salaries, local currency.
        variable_gross_income: Variable earner's gross pay, local currency.
        variable_net_income: Variable earner's net pay (after deductions and
            the monthly debt), local currency.
        total_income: fixed_income + variable_net_income.
        total_expenses: All ledger entries of the month.
        savings: total_income - total_expenses; negative when overspent.
        savings_rate: savings as a percentage of total_income.
        expense_ratio: total_expenses as a percentage of total_income.
        stability_score: 0-100, from the variation of the history's income.
        stability_status: "stable", "moderate" or "volatile".
        budget_status: "critical", "attention", "good" or "excellent".
        history: The months before ``period``, oldest first.
        exchange_rate: Rate used for the variable earner's pay, or None
            without a variable earner.
    """

    period: MonthKey
    fixed_income: Decimal
    variable_gross_income: Decimal
    variable_net_income: Decimal
    total_income: Decimal
    total_expenses: Decimal
    savings: Decimal
    savings_rate: Decimal
    expense_ratio: Decimal
    stability_score: Decimal
    stability_status: str
    budget_status: str
    history: List[MonthlyIncome] = field(default_factory=list)
    exchange_rate: Optional[Decimal] = None
