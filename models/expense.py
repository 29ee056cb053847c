"""ExpenseEntry model: the atomic ledger fact."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from models.period import MonthKey


@dataclass
class ExpenseEntry:
    """What one participant paid in one category for one month.

    At most one entry exists per (participant_id, category_id, month, year).

    Attributes:
        id: Unique identifier (auto-generated).
        participant_id: Participant who paid.
        category_id: Expense category.
        amount: Amount in local currency, always positive.
        month: Month (1-12).
        year: Four-digit year.
        recurring_template_id: Template that generated this entry, if any.
        created_at: Timestamp when the entry was first written.
    """

    id: int
    participant_id: int
    category_id: int
    amount: Decimal
    month: int
    year: int
    recurring_template_id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def period(self) -> MonthKey:
        return MonthKey(self.year, self.month)
