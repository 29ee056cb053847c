"""Salary conversion records: what a foreign-currency pay actually converted to."""

from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from errors import NotFoundError, ValidationError
from logger import get_logger
from models.period import validate_period
from models.salary_conversion import SalaryConversion
from money import ZERO, parse_amount, parse_rate, quantize

logger = get_logger()

RATE_PLACES = Decimal("0.000001")

_CONVERSION_SELECT_FIELDS = """id, participant_id, month, year, conversion_date,
       exchange_rate, foreign_amount, vet, final_local_amount, created_at, updated_at"""


def _rate(value, field: str) -> Decimal:
    return parse_rate(value, field).quantize(RATE_PLACES, rounding=ROUND_HALF_UP)


class SalaryConversionService:
    """Service for recorded salary conversions.

    Each participant has at most one conversion per payment month. A recorded
    conversion's rate takes precedence over the exchange-rate source when
    that month's salary report is computed.
    """

    def __init__(self, db_manager):
        """Initialize the salary conversion service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def upsert(
        self,
        participant_id: int,
        month: int,
        year: int,
        conversion_date: date,
        exchange_rate,
        foreign_amount,
        vet,
        final_local_amount,
    ) -> SalaryConversion:
        """Record, or replace, the conversion for a participant's payment month.

        Args:
            participant_id: Participant whose pay was converted.
            month: Payment month (1-12).
            year: Payment year.
            conversion_date: Day the conversion was executed.
            exchange_rate: Quoted rate; kept to 6 decimal places.
            foreign_amount: Amount withdrawn in foreign currency.
            vet: Effective rate after fees; kept to 6 decimal places.
            final_local_amount: Amount credited in local currency.

        Returns:
            The stored SalaryConversion.

        Raises:
            ValidationError: If a rate or amount is not positive, the period
                or date is invalid, or the participant does not exist.
        """
        validate_period(month, year)
        if not isinstance(conversion_date, date):
            raise ValidationError(
                f"conversion_date must be a date, got {conversion_date!r}", "conversion_date"
            )
        exchange_rate = _rate(exchange_rate, "exchange_rate")
        vet = _rate(vet, "vet")
        foreign_amount = self._positive(foreign_amount, "foreign_amount")
        final_local_amount = self._positive(final_local_amount, "final_local_amount")

        with self.db_manager.connect() as conn:
            if not conn.execute(
                "SELECT 1 FROM participants WHERE id = ?", (participant_id,)
            ).fetchone():
                raise ValidationError(
                    f"Participant {participant_id} does not exist", "participant_id"
                )

            conn.execute(
                """
                INSERT INTO salary_conversions
                    (participant_id, month, year, conversion_date, exchange_rate,
                     foreign_amount, vet, final_local_amount)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (participant_id, month, year) DO UPDATE SET
                    conversion_date = excluded.conversion_date,
                    exchange_rate = excluded.exchange_rate,
                    foreign_amount = excluded.foreign_amount,
                    vet = excluded.vet,
                    final_local_amount = excluded.final_local_amount,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (
                    participant_id,
                    month,
                    year,
                    conversion_date.isoformat(),
                    float(exchange_rate),
                    float(foreign_amount),
                    float(vet),
                    float(final_local_amount),
                ),
            )
            conn.commit()

        logger.info(
            f"Recorded conversion for participant {participant_id}, "
            f"{year:04d}/{month:02d}: {foreign_amount} at {exchange_rate} -> {final_local_amount}"
        )
        return self.find_by_month(participant_id, month, year)

    def find(self, conversion_id: int) -> Optional[SalaryConversion]:
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_CONVERSION_SELECT_FIELDS} FROM salary_conversions WHERE id = ?",
                (conversion_id,),
            )
            row = cursor.fetchone()
            return self._row_to_conversion(row) if row else None

    def find_by_month(
        self, participant_id: int, month: int, year: int
    ) -> Optional[SalaryConversion]:
        """Get the conversion recorded for a payment month, or None."""
        validate_period(month, year)
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_CONVERSION_SELECT_FIELDS}
                FROM salary_conversions
                WHERE participant_id = ? AND month = ? AND year = ?
                """,
                (participant_id, month, year),
            )
            row = cursor.fetchone()
            return self._row_to_conversion(row) if row else None

    def list_conversions(self, participant_id: int, year: int) -> List[SalaryConversion]:
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_CONVERSION_SELECT_FIELDS}
                FROM salary_conversions
                WHERE participant_id = ? AND year = ?
                ORDER BY month
                """,
                (participant_id, year),
            )
            return [self._row_to_conversion(row) for row in cursor.fetchall()]

    def delete(self, conversion_id: int) -> None:
        """Delete a conversion by ID.

        Raises:
            NotFoundError: If the conversion does not exist.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM salary_conversions WHERE id = ?", (conversion_id,)
            )
            conn.commit()
            if cursor.rowcount == 0:
                raise NotFoundError("Salary conversion", conversion_id)

    def _positive(self, value, field: str) -> Decimal:
        amount = parse_amount(value, field)
        if amount == ZERO:
            raise ValidationError(f"{field} must be positive", field)
        return amount

    def _row_to_conversion(self, row: tuple) -> SalaryConversion:
        return SalaryConversion(
            id=row[0],
            participant_id=row[1],
            month=row[2],
            year=row[3],
            conversion_date=date.fromisoformat(row[4]),
            exchange_rate=Decimal(str(row[5])).quantize(RATE_PLACES, rounding=ROUND_HALF_UP),
            foreign_amount=quantize(Decimal(str(row[6]))),
            vet=Decimal(str(row[7])).quantize(RATE_PLACES, rounding=ROUND_HALF_UP),
            final_local_amount=quantize(Decimal(str(row[8]))),
            created_at=datetime.fromisoformat(row[9]) if row[9] else None,
            updated_at=datetime.fromisoformat(row[10]) if row[10] else None,
        )
