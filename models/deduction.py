from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Deduction:
    """An ad-hoc charge (e.g. a boleto) against a participant's income.

    Always in local currency and scoped to a single (participant, month, year).
    """

    id: int
    participant_id: int
    description: str
    amount: Decimal
    due_date: date
    month: int
    year: int
    created_at: Optional[datetime] = None
