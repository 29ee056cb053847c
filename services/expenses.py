"""Expense ledger: per-participant, per-category, per-month entries."""

import sqlite3
from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from errors import ConflictError, NotFoundError, ValidationError
from logger import get_logger
from models.expense import ExpenseEntry
from models.period import validate_period
from money import ZERO, parse_amount, quantize

logger = get_logger()

_EXPENSE_SELECT_FIELDS = """id, participant_id, category_id, amount, month, year,
       recurring_template_id, created_at"""

_TUPLE_WHERE = "participant_id = ? AND category_id = ? AND month = ? AND year = ?"


class ExpenseLedger:
    """Service for the shared-expense ledger.

    The ledger holds at most one entry per (participant, category, month,
    year). Writes go through a single ``INSERT .. ON CONFLICT DO UPDATE``
    statement backed by a UNIQUE index, so concurrent upserts for the same
    tuple serialize to one row holding the last written value.
    """

    def __init__(self, db_manager):
        """Initialize the expense ledger.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def upsert_expense(
        self,
        participant_id: int,
        category_id: int,
        amount,
        month: int,
        year: int,
        recurring_template_id: Optional[int] = None,
    ) -> Optional[ExpenseEntry]:
        """Create or replace the entry for (participant, category, month, year).

        A blank or zero amount deletes the entry for the tuple instead of
        storing a zero; when no entry exists this is a no-op.

        Args:
            participant_id: Participant who paid.
            category_id: Expense category.
            amount: Amount in local currency; rounded to 2 decimals.
            month: Month (1-12).
            year: Four-digit year.
            recurring_template_id: Template tag for materialized entries.
                A manual upsert (None) detaches an entry from its template.

        Returns:
            The stored ExpenseEntry, or None when the amount deleted the tuple.

        Raises:
            ValidationError: If the amount is negative or not a finite number,
                the period is out of range, or the participant or category
                does not exist.
        """
        amount = parse_amount(amount)
        validate_period(month, year)

        with self.db_manager.connect() as conn:
            self.check_references(conn, participant_id, category_id)

            if amount == ZERO:
                cursor = conn.execute(
                    f"DELETE FROM expenses WHERE {_TUPLE_WHERE}",
                    (participant_id, category_id, month, year),
                )
                conn.commit()
                if cursor.rowcount:
                    logger.debug(
                        f"Deleted expense for participant {participant_id}, "
                        f"category {category_id}, {year:04d}/{month:02d} (zero amount)"
                    )
                return None

            try:
                conn.execute(
                    """
                    INSERT INTO expenses
                        (participant_id, category_id, amount, month, year, recurring_template_id)
                    VALUES (?, ?, ?, ?, ?, ?)
                    ON CONFLICT (participant_id, category_id, month, year) DO UPDATE SET
                        amount = excluded.amount,
                        recurring_template_id = excluded.recurring_template_id
                    """,
                    (
                        participant_id,
                        category_id,
                        float(amount),
                        month,
                        year,
                        recurring_template_id,
                    ),
                )
                conn.commit()
            except sqlite3.IntegrityError as e:
                conn.rollback()
                raise ConflictError(f"Could not upsert expense: {e}") from e

            entry = self._find_by_tuple(conn, participant_id, category_id, month, year)

        logger.debug(
            f"Upserted expense {entry.id}: participant {participant_id}, "
            f"category {category_id}, {year:04d}/{month:02d} = {entry.amount}"
        )
        return entry

    def add_amount(
        self, participant_id: int, category_id: int, amount, month: int, year: int
    ) -> ExpenseEntry:
        """Add to the entry for a tuple, creating it if missing.

        Used when confirmed document extractions are saved: several receipts
        in the same category and month accumulate into the one ledger entry.

        Raises:
            ValidationError: If the amount is not positive, or the period or
                references are invalid.
        """
        amount = parse_amount(amount)
        if amount == ZERO:
            raise ValidationError("amount must be positive", "amount")
        validate_period(month, year)

        with self.db_manager.connect() as conn:
            self.check_references(conn, participant_id, category_id)
            conn.execute(
                """
                INSERT INTO expenses (participant_id, category_id, amount, month, year)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT (participant_id, category_id, month, year) DO UPDATE SET
                    amount = ROUND(expenses.amount + excluded.amount, 2)
                """,
                (participant_id, category_id, float(amount), month, year),
            )
            conn.commit()
            return self._find_by_tuple(conn, participant_id, category_id, month, year)

    def delete_expense(self, expense_id: int) -> None:
        """Delete an entry by ID.

        Raises:
            NotFoundError: If no entry has this ID.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
            conn.commit()
            if cursor.rowcount == 0:
                raise NotFoundError("Expense", expense_id)

    def delete_by_template(self, template_id: int) -> int:
        """Delete every entry materialized from a recurring template.

        Returns:
            Number of entries deleted.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM expenses WHERE recurring_template_id = ?", (template_id,)
            )
            conn.commit()
            return cursor.rowcount

    def find(self, expense_id: int) -> Optional[ExpenseEntry]:
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_EXPENSE_SELECT_FIELDS} FROM expenses WHERE id = ?",
                (expense_id,),
            )
            row = cursor.fetchone()
            return self._row_to_expense(row) if row else None

    def find_by_tuple(
        self, participant_id: int, category_id: int, month: int, year: int
    ) -> Optional[ExpenseEntry]:
        with self.db_manager.connect() as conn:
            return self._find_by_tuple(conn, participant_id, category_id, month, year)

    def find_by_template(self, template_id: int) -> List[ExpenseEntry]:
        """Get entries tagged with a recurring template, in period order."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_EXPENSE_SELECT_FIELDS}
                FROM expenses
                WHERE recurring_template_id = ?
                ORDER BY year, month
                """,
                (template_id,),
            )
            return [self._row_to_expense(row) for row in cursor.fetchall()]

    def list_expenses(self, year: int, month: Optional[int] = None) -> List[ExpenseEntry]:
        """Get all entries for a year, optionally filtered to one month.

        Args:
            year: Four-digit year.
            month: Optional month (1-12).

        Returns:
            List of ExpenseEntry objects ordered by month, participant, category.
        """
        query = f"SELECT {_EXPENSE_SELECT_FIELDS} FROM expenses WHERE year = ?"
        params = [year]

        if month is not None:
            validate_period(month, year)
            query += " AND month = ?"
            params.append(month)

        query += " ORDER BY month, participant_id, category_id"

        with self.db_manager.connect() as conn:
            cursor = conn.execute(query, params)
            return [self._row_to_expense(row) for row in cursor.fetchall()]

    def total_by_month(self, year: int, month: int) -> Decimal:
        return _sum(e.amount for e in self.list_expenses(year, month))

    def total_by_category(self, category_id: int, year: Optional[int] = None) -> Decimal:
        """Sum a category's entries, across all years unless one is given."""
        query = f"SELECT {_EXPENSE_SELECT_FIELDS} FROM expenses WHERE category_id = ?"
        params = [category_id]
        if year is not None:
            query += " AND year = ?"
            params.append(year)

        with self.db_manager.connect() as conn:
            rows = conn.execute(query, params).fetchall()

        return _sum(self._row_to_expense(row).amount for row in rows)

    def grand_total(self, year: int) -> Decimal:
        return _sum(e.amount for e in self.list_expenses(year))

    def totals_by_participant(
        self, year: int, month: int, participant_ids: Optional[List[int]] = None
    ) -> Dict[int, Decimal]:
        """Sum a month's entries per participant.

        Args:
            year: Four-digit year.
            month: Month (1-12).
            participant_ids: Participants that must appear in the result with
                a zero total even when they have no entries.

        Returns:
            Mapping of participant ID to total.
        """
        totals = defaultdict(lambda: ZERO)
        for participant_id in participant_ids or []:
            totals[participant_id] = ZERO
        for entry in self.list_expenses(year, month):
            totals[entry.participant_id] += entry.amount
        return dict(totals)

    def check_references(self, conn, participant_id: int, category_id: int) -> None:
        if not conn.execute(
            "SELECT 1 FROM participants WHERE id = ?", (participant_id,)
        ).fetchone():
            raise ValidationError(
                f"Participant {participant_id} does not exist", "participant_id"
            )
        if not conn.execute(
            "SELECT 1 FROM categories WHERE id = ?", (category_id,)
        ).fetchone():
            raise ValidationError(
                f"Category {category_id} does not exist", "category_id"
            )

    def _find_by_tuple(
        self, conn, participant_id: int, category_id: int, month: int, year: int
    ) -> Optional[ExpenseEntry]:
        cursor = conn.execute(
            f"SELECT {_EXPENSE_SELECT_FIELDS} FROM expenses WHERE {_TUPLE_WHERE}",
            (participant_id, category_id, month, year),
        )
        row = cursor.fetchone()
        return self._row_to_expense(row) if row else None

    def _row_to_expense(self, row: tuple) -> ExpenseEntry:
        """Convert a database row to an ExpenseEntry object."""
        return ExpenseEntry(
            id=row[0],
            participant_id=row[1],
            category_id=row[2],
            amount=quantize(Decimal(str(row[3]))),
            month=row[4],
            year=row[5],
            recurring_template_id=row[6],
            created_at=datetime.fromisoformat(row[7]) if row[7] else None,
        )


def _sum(amounts) -> Decimal:
    return quantize(sum(amounts, ZERO))
