"""RecurringTemplate model for recurring debts."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from models.period import MonthKey, months_between


@dataclass
class RecurringTemplate:
    """A constant monthly charge over an inclusive date range.

    Attributes:
        id: Unique identifier (auto-generated).
        participant_id: Participant who pays the debt.
        category_id: Category the materialized entries are filed under.
        monthly_amount: Amount applied in full to every covered month.
        start_date: First day of the range (inclusive).
        end_date: Last day of the range (inclusive).
        created_at: Timestamp when the template was created.
    """

    id: int
    participant_id: int
    category_id: int
    monthly_amount: Decimal
    start_date: date
    end_date: date
    created_at: Optional[datetime] = None

    def covered_months(self) -> List[MonthKey]:
        """Every month touched by the date range, partial months included."""
        return months_between(self.start_date, self.end_date)
