"""Derived settlement results. Recomputed on every query, never persisted."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

from models.period import MonthKey


@dataclass(frozen=True)
class GrossIncome:
    """Gross pay for one payment month.

    For variable earners, ``working_month`` is the month whose business days
    were billed (the month before ``payment_month``). For fixed earners the
    two are the same month and hours are zero.
    """

    amount: Decimal
    currency: str
    payment_month: MonthKey
    working_month: MonthKey
    working_days: int = 0
    hours_per_day: int = 0
    total_hours: int = 0


@dataclass
class MonthlySettlement:
    """Who owes whom for one month of shared expenses.

    ``debt`` is positive when the reference participant owes the counterpart
    and negative when the counterpart owes the reference.
    """

    period: MonthKey
    reference_participant_id: int
    counterpart_participant_id: int
    totals: Dict[int, Decimal]
    split_ratio: Decimal
    debt: Decimal

    @property
    def debtor_id(self) -> Optional[int]:
        if self.debt > 0:
            return self.reference_participant_id
        if self.debt < 0:
            return self.counterpart_participant_id
        return None

    @property
    def creditor_id(self) -> Optional[int]:
        if self.debt > 0:
            return self.counterpart_participant_id
        if self.debt < 0:
            return self.reference_participant_id
        return None

    @property
    def amount_owed(self) -> Decimal:
        return abs(self.debt)


@dataclass
class AnnualSettlement:
    year: int
    reference_participant_id: int
    months: List[MonthlySettlement] = field(default_factory=list)

    @property
    def total_debt(self) -> Decimal:
        return sum((m.debt for m in self.months), Decimal("0.00"))


@dataclass
class SalaryReport:
    """Monthly pay statement for a variable earner.

    Attributes:
        participant_id: The earner.
        payment_month: Month the pay is reported/paid in.
        working_month: Month whose business days were billed.
        hourly_rate: Rate in ``currency``.
        currency: Foreign currency of the hourly rate.
        local_currency: Currency of the local amounts.
        working_days: Business days in the working month.
        hours_per_day: Hours billed per business day.
        total_hours: working_days * hours_per_day.
        gross_foreign: Gross pay in ``currency``.
        exchange_rate: Rate used to convert to local currency.
        gross_local: Gross pay in local currency.
        deductions: Sum of deductions for the payment month.
        debt: Monthly settlement debt with this earner as reference
            (positive: they owe; negative: they are owed).
        net_local: gross_local - deductions - debt.
    """

    participant_id: int
    payment_month: MonthKey
    working_month: MonthKey
    hourly_rate: Decimal
    currency: str
    local_currency: str
    working_days: int
    hours_per_day: int
    total_hours: int
    gross_foreign: Decimal
    exchange_rate: Decimal
    gross_local: Decimal
    deductions: Decimal
    debt: Decimal
    net_local: Decimal


@dataclass
class AnnualSalaryReport:
    """Twelve monthly salary reports of one year.

    ``exchange_rate`` applies to every month unless ``per_month_rates`` is
    set, in which case months with a recorded conversion carry their own
    rate on the monthly report.
    """

    participant_id: int
    year: int
    hourly_rate: Decimal
    currency: str
    local_currency: str
    exchange_rate: Decimal
    hours_per_day: int
    per_month_rates: bool = False
    months: List[SalaryReport] = field(default_factory=list)

    @property
    def total_working_days(self) -> int:
        return sum(m.working_days for m in self.months)

    @property
    def total_hours(self) -> int:
        return sum(m.total_hours for m in self.months)

    @property
    def total_gross_foreign(self) -> Decimal:
        return sum((m.gross_foreign for m in self.months), Decimal("0.00"))

    @property
    def total_gross_local(self) -> Decimal:
        return sum((m.gross_local for m in self.months), Decimal("0.00"))

    @property
    def total_deductions(self) -> Decimal:
        return sum((m.deductions for m in self.months), Decimal("0.00"))

    @property
    def total_debt(self) -> Decimal:
        return sum((m.debt for m in self.months), Decimal("0.00"))

    @property
    def total_net_local(self) -> Decimal:
        return sum((m.net_local for m in self.months), Decimal("0.00"))
