"""Salary profiles and the per-month gross income they resolve to."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from errors import NotFoundError, ValidationError
from logger import get_logger
from models.period import MonthKey
from models.salary_profile import (
    ROLE_FIXED,
    ROLE_VARIABLE,
    FixedIncome,
    SalaryProfile,
)
from models.settlement import GrossIncome
from money import ZERO, parse_amount, quantize

logger = get_logger()

HOURS_PER_DAY = 8

_PROFILE_SELECT_FIELDS = """id, participant_id, role, fixed_amount, hourly_rate,
       currency, created_at, updated_at"""


class SalaryProfileService:
    """Service for salary profiles (one row per participant)."""

    def __init__(self, db_manager, local_currency: str = "BRL", foreign_currency: str = "USD"):
        """Initialize the salary profile service.

        Args:
            db_manager: Database manager instance for database operations.
            local_currency: Currency of fixed salaries.
            foreign_currency: Default currency of hourly rates.
        """
        self.db_manager = db_manager
        self.local_currency = local_currency
        self.foreign_currency = foreign_currency

    def upsert(
        self,
        participant_id: int,
        fixed_amount=None,
        hourly_rate=None,
        currency: Optional[str] = None,
    ) -> SalaryProfile:
        """Create or replace a participant's salary profile.

        Exactly one of fixed_amount and hourly_rate must be given; it selects
        the profile's role.

        Args:
            participant_id: Owning participant.
            fixed_amount: Monthly salary in local currency (fixed earner).
            hourly_rate: Hourly rate in foreign currency (variable earner).
            currency: Currency of an hourly rate; defaults to the configured
                foreign currency. Fixed salaries are always local currency.

        Returns:
            The stored SalaryProfile.

        Raises:
            ValidationError: If both or neither amount is given, the amount
                is not positive, or the participant does not exist.
        """
        if (fixed_amount is None) == (hourly_rate is None):
            raise ValidationError(
                "Provide exactly one of fixed_amount or hourly_rate", "fixed_amount"
            )

        if fixed_amount is not None:
            role = ROLE_FIXED
            fixed_amount = self._positive(fixed_amount, "fixed_amount")
            currency = self.local_currency
        else:
            role = ROLE_VARIABLE
            hourly_rate = self._positive(hourly_rate, "hourly_rate")
            currency = (currency or self.foreign_currency).upper()

        with self.db_manager.connect() as conn:
            if not conn.execute(
                "SELECT 1 FROM participants WHERE id = ?", (participant_id,)
            ).fetchone():
                raise ValidationError(
                    f"Participant {participant_id} does not exist", "participant_id"
                )

            conn.execute(
                """
                INSERT INTO salary_profiles
                    (participant_id, role, fixed_amount, hourly_rate, currency)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT (participant_id) DO UPDATE SET
                    role = excluded.role,
                    fixed_amount = excluded.fixed_amount,
                    hourly_rate = excluded.hourly_rate,
                    currency = excluded.currency,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (
                    participant_id,
                    role,
                    float(fixed_amount) if fixed_amount is not None else None,
                    float(hourly_rate) if hourly_rate is not None else None,
                    currency,
                ),
            )
            conn.commit()

        logger.info(f"Saved {role} salary profile for participant {participant_id}")
        return self.find_by_participant(participant_id)

    def find(self, profile_id: int) -> Optional[SalaryProfile]:
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_PROFILE_SELECT_FIELDS} FROM salary_profiles WHERE id = ?",
                (profile_id,),
            )
            row = cursor.fetchone()
            return self._row_to_profile(row) if row else None

    def find_by_participant(self, participant_id: int) -> Optional[SalaryProfile]:
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_PROFILE_SELECT_FIELDS}
                FROM salary_profiles
                WHERE participant_id = ?
                """,
                (participant_id,),
            )
            row = cursor.fetchone()
            return self._row_to_profile(row) if row else None

    def get_by_participant(self, participant_id: int) -> SalaryProfile:
        """Get a participant's profile or raise NotFoundError."""
        profile = self.find_by_participant(participant_id)
        if profile is None:
            raise NotFoundError("Salary profile for participant", participant_id)
        return profile

    def delete(self, profile_id: int) -> None:
        """Delete a profile by ID.

        Raises:
            NotFoundError: If the profile does not exist.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM salary_profiles WHERE id = ?", (profile_id,)
            )
            conn.commit()
            if cursor.rowcount == 0:
                raise NotFoundError("Salary profile", profile_id)

    def compute_gross_for_month(
        self, participant_id: int, month: int, year: int
    ) -> GrossIncome:
        """Resolve a participant's gross income for a payment month.

        Fixed earners get their flat salary in local currency. Variable
        earners are paid in month ``m`` for the business days worked in month
        ``m - 1``: working_days * HOURS_PER_DAY * hourly_rate, in the
        profile's currency.

        Args:
            participant_id: The earner.
            month: Payment month (1-12).
            year: Payment year.

        Returns:
            GrossIncome carrying both the payment and the working month.

        Raises:
            NotFoundError: If the participant has no salary profile.
            ValidationError: If the profile lacks the amount its role needs.
        """
        payment_month = MonthKey(year, month)
        profile = self.get_by_participant(participant_id)
        income = profile.income_model

        if isinstance(income, FixedIncome):
            return GrossIncome(
                amount=quantize(income.amount),
                currency=self.local_currency,
                payment_month=payment_month,
                working_month=payment_month,
            )

        working_month = payment_month.previous()
        working_days = working_month.business_days()
        total_hours = working_days * HOURS_PER_DAY

        return GrossIncome(
            amount=quantize(income.hourly_rate * total_hours),
            currency=profile.currency,
            payment_month=payment_month,
            working_month=working_month,
            working_days=working_days,
            hours_per_day=HOURS_PER_DAY,
            total_hours=total_hours,
        )

    def _positive(self, value, field: str) -> Decimal:
        amount = parse_amount(value, field)
        if amount == ZERO:
            raise ValidationError(f"{field} must be positive", field)
        return amount

    def _row_to_profile(self, row: tuple) -> SalaryProfile:
        return SalaryProfile(
            id=row[0],
            participant_id=row[1],
            role=row[2],
            fixed_amount=quantize(Decimal(str(row[3]))) if row[3] is not None else None,
            hourly_rate=quantize(Decimal(str(row[4]))) if row[4] is not None else None,
            currency=row[5],
            created_at=datetime.fromisoformat(row[6]) if row[6] else None,
            updated_at=datetime.fromisoformat(row[7]) if row[7] else None,
        )
