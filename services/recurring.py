"""Recurring expense templates and their materialization into the ledger."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from errors import NotFoundError, ValidationError
from logger import get_logger
from models.expense import ExpenseEntry
from models.recurring_template import RecurringTemplate
from models.period import MonthKey, months_between
from money import ZERO, parse_amount, quantize

logger = get_logger()

_TEMPLATE_SELECT_FIELDS = """id, participant_id, category_id, monthly_amount,
       start_date, end_date, created_at"""


class RecurringExpenseService:
    """Service for recurring debt templates.

    A template is expanded into one ledger entry per covered month when it is
    created. Reads never re-expand it. Editing a template deletes the entries
    tagged with it and materializes the new range; deleting a template
    deletes its entries. Entries entered by hand are never overwritten, and
    templates for the same participant and category may not share a month.
    """

    def __init__(self, db_manager, expenses):
        """Initialize the recurring expense service.

        Args:
            db_manager: Database manager instance for database operations.
            expenses: ExpenseLedger that materialized entries are written to.
        """
        self.db_manager = db_manager
        self.expenses = expenses

    def materialize(self, template: RecurringTemplate) -> List[ExpenseEntry]:
        """Write one ledger entry per month touched by the template's range.

        The full monthly amount is applied to every touched month, including
        partial first and last months. Months whose tuple already holds a
        manual entry, or an entry of another template, are left untouched.
        Each month is upserted on its own; if a later month fails, earlier
        months stay written.

        Args:
            template: A persisted template.

        Returns:
            The materialized entries, in month order.

        Raises:
            ValidationError: If the template's start date is after its end date.
        """
        months = months_between(template.start_date, template.end_date)

        entries = []
        skipped = []
        for period in months:
            existing = self.expenses.find_by_tuple(
                template.participant_id, template.category_id, period.month, period.year
            )
            if existing is not None and existing.recurring_template_id != template.id:
                skipped.append(period)
                continue

            try:
                entry = self.expenses.upsert_expense(
                    template.participant_id,
                    template.category_id,
                    template.monthly_amount,
                    period.month,
                    period.year,
                    recurring_template_id=template.id,
                )
            except Exception as e:
                logger.error(
                    f"Materializing template {template.id} failed at {period} "
                    f"after {len(entries)} of {len(months)} months: {e}"
                )
                raise
            entries.append(entry)

        if skipped:
            logger.info(
                f"Template {template.id} kept existing entries for "
                f"{', '.join(str(p) for p in skipped)}"
            )
        logger.info(
            f"Materialized template {template.id} into {len(entries)} month(s) "
            f"({months[0]} - {months[-1]})"
        )
        return entries

    def create(
        self,
        participant_id: int,
        category_id: int,
        monthly_amount,
        start_date: date,
        end_date: date,
    ) -> RecurringTemplate:
        """Create a template and materialize it into the ledger.

        Args:
            participant_id: Participant who pays the debt.
            category_id: Category for the materialized entries.
            monthly_amount: Positive amount applied to every covered month.
            start_date: Inclusive start of the range.
            end_date: Inclusive end of the range.

        Returns:
            The created RecurringTemplate.

        Raises:
            ValidationError: If the amount is not positive, the range is
                inverted or overlaps another template for the same participant
                and category, or the participant or category does not exist.
        """
        monthly_amount = self._validate(monthly_amount, start_date, end_date)

        with self.db_manager.connect() as conn:
            self.expenses.check_references(conn, participant_id, category_id)
            self._check_overlap(conn, participant_id, category_id, start_date, end_date)
            cursor = conn.execute(
                """
                INSERT INTO recurring_templates
                    (participant_id, category_id, monthly_amount, start_date, end_date)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    participant_id,
                    category_id,
                    float(monthly_amount),
                    start_date.isoformat(),
                    end_date.isoformat(),
                ),
            )
            conn.commit()
            template_id = cursor.lastrowid

        template = self.get(template_id)
        self.materialize(template)
        return template

    def update(
        self,
        template_id: int,
        participant_id: int,
        category_id: int,
        monthly_amount,
        start_date: date,
        end_date: date,
    ) -> RecurringTemplate:
        """Replace a template's fields and re-materialize it.

        Entries previously materialized from the template are deleted first,
        so the new range never double-applies.

        Raises:
            NotFoundError: If the template does not exist.
            ValidationError: As for create().
        """
        self.get(template_id)
        monthly_amount = self._validate(monthly_amount, start_date, end_date)

        with self.db_manager.connect() as conn:
            self.expenses.check_references(conn, participant_id, category_id)
            self._check_overlap(
                conn, participant_id, category_id, start_date, end_date, template_id
            )

        removed = self.expenses.delete_by_template(template_id)
        logger.debug(f"Removed {removed} entries of template {template_id} before update")

        with self.db_manager.connect() as conn:
            conn.execute(
                """
                UPDATE recurring_templates
                SET participant_id = ?, category_id = ?, monthly_amount = ?,
                    start_date = ?, end_date = ?
                WHERE id = ?
                """,
                (
                    participant_id,
                    category_id,
                    float(monthly_amount),
                    start_date.isoformat(),
                    end_date.isoformat(),
                    template_id,
                ),
            )
            conn.commit()

        template = self.get(template_id)
        self.materialize(template)
        return template

    def delete(self, template_id: int) -> int:
        """Delete a template together with the entries it materialized.

        Returns:
            Number of ledger entries removed.

        Raises:
            NotFoundError: If the template does not exist.
        """
        self.get(template_id)
        removed = self.expenses.delete_by_template(template_id)

        with self.db_manager.connect() as conn:
            conn.execute("DELETE FROM recurring_templates WHERE id = ?", (template_id,))
            conn.commit()

        logger.info(f"Deleted template {template_id} and {removed} ledger entries")
        return removed

    def find(self, template_id: int) -> Optional[RecurringTemplate]:
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_TEMPLATE_SELECT_FIELDS} FROM recurring_templates WHERE id = ?",
                (template_id,),
            )
            row = cursor.fetchone()
            return self._row_to_template(row) if row else None

    def get(self, template_id: int) -> RecurringTemplate:
        template = self.find(template_id)
        if template is None:
            raise NotFoundError("Recurring template", template_id)
        return template

    def find_all(self) -> List[RecurringTemplate]:
        """Get all templates ordered by start date."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_TEMPLATE_SELECT_FIELDS}
                FROM recurring_templates
                ORDER BY start_date, id
                """
            )
            return [self._row_to_template(row) for row in cursor.fetchall()]

    def _validate(self, monthly_amount, start_date: date, end_date: date) -> Decimal:
        monthly_amount = parse_amount(monthly_amount, "monthly_amount")
        if monthly_amount == ZERO:
            raise ValidationError("monthly_amount must be positive", "monthly_amount")
        if start_date > end_date:
            raise ValidationError(
                f"start date {start_date} is after end date {end_date}", "start_date"
            )
        return monthly_amount

    def _check_overlap(
        self,
        conn,
        participant_id: int,
        category_id: int,
        start_date: date,
        end_date: date,
        exclude_id: Optional[int] = None,
    ) -> None:
        """Reject a range sharing a month with another template of the same tuple.

        Two such templates would compete for the same ledger entries.

        Raises:
            ValidationError: If an overlapping template exists.
        """
        first = MonthKey.from_date(start_date)
        last = MonthKey.from_date(end_date)
        cursor = conn.execute(
            f"""
            SELECT {_TEMPLATE_SELECT_FIELDS}
            FROM recurring_templates
            WHERE participant_id = ? AND category_id = ? AND id != ?
            """,
            (participant_id, category_id, exclude_id or 0),
        )
        for row in cursor.fetchall():
            other = self._row_to_template(row)
            if (
                first <= MonthKey.from_date(other.end_date)
                and MonthKey.from_date(other.start_date) <= last
            ):
                raise ValidationError(
                    f"Template {other.id} already covers {other.start_date} .. "
                    f"{other.end_date} for this participant and category",
                    "start_date",
                )

    def _row_to_template(self, row: tuple) -> RecurringTemplate:
        return RecurringTemplate(
            id=row[0],
            participant_id=row[1],
            category_id=row[2],
            monthly_amount=quantize(Decimal(str(row[3]))),
            start_date=date.fromisoformat(row[4]),
            end_date=date.fromisoformat(row[5]),
            created_at=datetime.fromisoformat(row[6]) if row[6] else None,
        )
