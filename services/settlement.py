"""Settlement calculator: monthly debt between participants and salary reports.

Every call is a read-and-compute over current ledger state. Nothing here is
cached or persisted.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional

from errors import ValidationError
from logger import get_logger
from models.participant import Participant
from models.period import MonthKey, year_months
from models.salary_profile import VariableIncome
from models.settlement import (
    AnnualSalaryReport,
    AnnualSettlement,
    MonthlySettlement,
    SalaryReport,
)
from money import convert, quantize
from services.salary_profiles import HOURS_PER_DAY

logger = get_logger()


def parse_split_ratio(value) -> Decimal:
    """Parse the settlement split ratio (1.0 = full gap, 0.5 = half the gap).

    Raises:
        ValidationError: If the ratio is not a number in (0, 1].
    """
    try:
        ratio = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"split_ratio is not a number: {value!r}", "split_ratio")
    if not ratio.is_finite() or ratio <= 0 or ratio > 1:
        raise ValidationError(
            f"split_ratio must be greater than 0 and at most 1, got {value!r}",
            "split_ratio",
        )
    return ratio


class SettlementCalculator:
    """Combines the ledgers, salary profiles and exchange rates into settlements.

    Sign convention: for a reference participant R and counterpart C,
    ``debt = (total_C - total_R) * split_ratio``. Positive means R owes C;
    negative means C owes R. By default R is the participant whose color is
    ``reference_color``.

    Args:
        participants: ParticipantService.
        expenses: ExpenseLedger.
        salary_profiles: SalaryProfileService.
        deductions: DeductionService.
        exchange_rates: ExchangeRateService.
        local_currency: Currency of ledger amounts and net pay.
        split_ratio: Share of the contribution gap that is reimbursed.
        reference_color: Color of the default reference participant.
        conversions: Optional SalaryConversionService; a conversion recorded
            for a payment month supplies that month's rate.
    """

    def __init__(
        self,
        participants,
        expenses,
        salary_profiles,
        deductions,
        exchange_rates,
        local_currency: str = "BRL",
        split_ratio=Decimal("1.0"),
        reference_color: str = "blue",
        conversions=None,
    ):
        self.participants = participants
        self.expenses = expenses
        self.salary_profiles = salary_profiles
        self.deductions = deductions
        self.exchange_rates = exchange_rates
        self.local_currency = local_currency
        self.split_ratio = parse_split_ratio(split_ratio)
        self.reference_color = reference_color
        self.conversions = conversions

    def reference_participant(self, participant_id: Optional[int] = None) -> Participant:
        """Resolve the reference participant (explicit id, else by color).

        Raises:
            NotFoundError: If an explicit participant_id does not exist.
            ValidationError: If no participant has the reference color.
        """
        if participant_id is not None:
            return self.participants.get(participant_id)

        participant = self.participants.find_by_color(self.reference_color)
        if participant is None:
            raise ValidationError(
                f"No participant has the reference color {self.reference_color!r}"
            )
        return participant

    def compute_monthly_settlement(
        self, year: int, month: int, reference_participant_id: Optional[int] = None
    ) -> MonthlySettlement:
        """Compute both participants' totals and the debt for one month.

        Args:
            year: Four-digit year.
            month: Month (1-12).
            reference_participant_id: Positive side of the sign convention;
                defaults to the participant with the reference color.

        Returns:
            MonthlySettlement for the month.
        """
        period = MonthKey(year, month)
        reference = self.reference_participant(reference_participant_id)
        counterpart = self.participants.counterpart_of(reference.id)

        totals = self.expenses.totals_by_participant(
            year, month, [reference.id, counterpart.id]
        )
        debt = quantize((totals[counterpart.id] - totals[reference.id]) * self.split_ratio)

        logger.debug(
            f"Settlement {period}: {reference.name}={totals[reference.id]}, "
            f"{counterpart.name}={totals[counterpart.id]}, debt={debt}"
        )

        return MonthlySettlement(
            period=period,
            reference_participant_id=reference.id,
            counterpart_participant_id=counterpart.id,
            totals=totals,
            split_ratio=self.split_ratio,
            debt=debt,
        )

    def compute_monthly_debt(
        self, year: int, month: int, reference_participant_id: Optional[int] = None
    ) -> Decimal:
        """Signed debt for one month; see the class docstring for the sign."""
        return self.compute_monthly_settlement(year, month, reference_participant_id).debt

    def compute_annual_settlement(
        self, year: int, reference_participant_id: Optional[int] = None
    ) -> AnnualSettlement:
        reference = self.reference_participant(reference_participant_id)
        return AnnualSettlement(
            year=year,
            reference_participant_id=reference.id,
            months=[
                self.compute_monthly_settlement(p.year, p.month, reference.id)
                for p in year_months(year)
            ],
        )

    def compute_monthly_salary_report(
        self, participant_id: int, month: int, year: int, exchange_rate=None
    ) -> SalaryReport:
        """Compute a variable earner's pay statement for a payment month.

        Gross pay is billed from the previous (working) month's business
        days, converted at ``exchange_rate``. When None, the rate of the
        conversion recorded for the payment month is used, else one is
        looked up. The month's deductions are subtracted. The monthly debt,
        with this earner as reference, is subtracted when they owe and added
        when they are owed.

        Args:
            participant_id: The variable earner.
            month: Payment month (1-12).
            year: Payment year.
            exchange_rate: Explicit foreign -> local rate, or None to use the
                recorded conversion or the exchange-rate source.

        Returns:
            SalaryReport for the payment month.

        Raises:
            NotFoundError: If the participant or their profile does not exist.
            ValidationError: If the participant is not a variable earner.
        """
        profile = self._variable_profile(participant_id)
        gross = self.salary_profiles.compute_gross_for_month(participant_id, month, year)
        recorded = (
            None
            if exchange_rate is not None
            else self._recorded_rate(participant_id, gross.payment_month)
        )
        rate = recorded or self.exchange_rates.resolve(
            gross.currency, self.local_currency, exchange_rate
        )
        return self._salary_report(profile, gross, rate)

    def compute_annual_salary_report(
        self, participant_id: int, year: int, exchange_rate=None, per_month_rates=False
    ) -> AnnualSalaryReport:
        """Accumulate the twelve payment months of a year.

        By default a single exchange rate (explicit, or looked up once) is
        applied uniformly to every month, so the annual totals equal the sum
        of the monthly reports computed with that same rate.

        With ``per_month_rates``, months that have a recorded conversion use
        its rate and the single rate covers the rest.
        """
        profile = self._variable_profile(participant_id)
        rate = self.exchange_rates.resolve(
            profile.currency, self.local_currency, exchange_rate
        )

        months = []
        for period in year_months(year):
            gross = self.salary_profiles.compute_gross_for_month(
                participant_id, period.month, period.year
            )
            recorded = self._recorded_rate(participant_id, period) if per_month_rates else None
            months.append(self._salary_report(profile, gross, recorded or rate))

        report = AnnualSalaryReport(
            participant_id=participant_id,
            year=year,
            hourly_rate=profile.hourly_rate,
            currency=profile.currency,
            local_currency=self.local_currency,
            exchange_rate=rate,
            hours_per_day=HOURS_PER_DAY,
            per_month_rates=per_month_rates,
            months=months,
        )
        logger.info(
            f"Annual salary {year} for participant {participant_id}: "
            f"gross {report.total_gross_local}, net {report.total_net_local} "
            f"{self.local_currency} at rate {rate}"
        )
        return report

    def _recorded_rate(self, participant_id: int, period: MonthKey) -> Optional[Decimal]:
        if self.conversions is None:
            return None
        recorded = self.conversions.find_by_month(participant_id, period.month, period.year)
        return recorded.exchange_rate if recorded else None

    def _variable_profile(self, participant_id: int):
        self.participants.get(participant_id)
        profile = self.salary_profiles.get_by_participant(participant_id)
        if not isinstance(profile.income_model, VariableIncome):
            raise ValidationError(
                f"Participant {participant_id} has a {profile.role} salary; "
                "salary reports are for variable earners",
                "participant_id",
            )
        return profile

    def _salary_report(self, profile, gross, rate: Decimal) -> SalaryReport:
        period = gross.payment_month
        gross_local = convert(gross.amount, rate)
        deductions = self.deductions.sum_deductions(
            profile.participant_id, period.month, period.year
        )
        debt = self.compute_monthly_debt(period.year, period.month, profile.participant_id)
        net_local = quantize(gross_local - deductions - debt)

        return SalaryReport(
            participant_id=profile.participant_id,
            payment_month=period,
            working_month=gross.working_month,
            hourly_rate=profile.hourly_rate,
            currency=gross.currency,
            local_currency=self.local_currency,
            working_days=gross.working_days,
            hours_per_day=gross.hours_per_day,
            total_hours=gross.total_hours,
            gross_foreign=gross.amount,
            exchange_rate=rate,
            gross_local=gross_local,
            deductions=deductions,
            debt=debt,
            net_local=net_local,
        )
