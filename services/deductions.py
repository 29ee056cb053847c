"""Deduction service: ad-hoc monthly charges against a participant's income."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from errors import NotFoundError, ValidationError
from models.deduction import Deduction
from models.period import validate_period
from money import ZERO, parse_amount, quantize

_DEDUCTION_SELECT_FIELDS = """id, participant_id, description, amount, due_date,
       month, year, created_at"""


class DeductionService:
    """Service for managing deductions (boletos).

    Deductions are in local currency, scoped to one (participant, month,
    year), and never recur.
    """

    def __init__(self, db_manager):
        """Initialize the deduction service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def create(
        self,
        participant_id: int,
        description: str,
        amount,
        due_date: date,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Deduction:
        """Create a deduction.

        Args:
            participant_id: Participant whose income is charged.
            description: What the charge is (e.g. "IPTU").
            amount: Positive amount in local currency.
            due_date: Due date of the charge.
            month: Month the deduction applies to; defaults to due_date's.
            year: Year the deduction applies to; defaults to due_date's.

        Returns:
            The created Deduction.

        Raises:
            ValidationError: If the description is empty, the amount is not
                positive, the period is invalid, or the participant is unknown.
        """
        description = (description or "").strip()
        if not description:
            raise ValidationError("Deduction description cannot be empty", "description")

        amount = parse_amount(amount)
        if amount == ZERO:
            raise ValidationError("Deduction amount must be positive", "amount")

        if not isinstance(due_date, date):
            raise ValidationError(f"due_date must be a date, got {due_date!r}", "due_date")

        month = due_date.month if month is None else month
        year = due_date.year if year is None else year
        validate_period(month, year)

        with self.db_manager.connect() as conn:
            if not conn.execute(
                "SELECT 1 FROM participants WHERE id = ?", (participant_id,)
            ).fetchone():
                raise ValidationError(
                    f"Participant {participant_id} does not exist", "participant_id"
                )

            cursor = conn.execute(
                """
                INSERT INTO deductions
                    (participant_id, description, amount, due_date, month, year)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    participant_id,
                    description,
                    float(amount),
                    due_date.isoformat(),
                    month,
                    year,
                ),
            )
            conn.commit()
            deduction_id = cursor.lastrowid

        return self.find(deduction_id)

    def find(self, deduction_id: int) -> Optional[Deduction]:
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_DEDUCTION_SELECT_FIELDS} FROM deductions WHERE id = ?",
                (deduction_id,),
            )
            row = cursor.fetchone()
            return self._row_to_deduction(row) if row else None

    def list_deductions(self, participant_id: int, month: int, year: int) -> List[Deduction]:
        """Get a participant's deductions for one month, ordered by due date."""
        validate_period(month, year)
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_DEDUCTION_SELECT_FIELDS}
                FROM deductions
                WHERE participant_id = ? AND month = ? AND year = ?
                ORDER BY due_date, id
                """,
                (participant_id, month, year),
            )
            return [self._row_to_deduction(row) for row in cursor.fetchall()]

    def sum_deductions(self, participant_id: int, month: int, year: int) -> Decimal:
        """Total of a participant's deductions for one month (zero if none)."""
        deductions = self.list_deductions(participant_id, month, year)
        return quantize(sum((d.amount for d in deductions), ZERO))

    def delete(self, deduction_id: int) -> None:
        """Delete a deduction by ID.

        Raises:
            NotFoundError: If the deduction does not exist.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute("DELETE FROM deductions WHERE id = ?", (deduction_id,))
            conn.commit()
            if cursor.rowcount == 0:
                raise NotFoundError("Deduction", deduction_id)

    def _row_to_deduction(self, row: tuple) -> Deduction:
        return Deduction(
            id=row[0],
            participant_id=row[1],
            description=row[2],
            amount=quantize(Decimal(str(row[3]))),
            due_date=date.fromisoformat(row[4]),
            month=row[5],
            year=row[6],
            created_at=datetime.fromisoformat(row[7]) if row[7] else None,
        )
