from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from models.period import MonthKey


@dataclass
class SalaryConversion:
    """A foreign-currency pay withdrawal that was converted to local currency.

    Attributes:
        id: Unique identifier (auto-generated).
        participant_id: Participant whose pay was converted.
        month: Payment month the conversion belongs to.
        year: Payment year.
        conversion_date: Day the conversion was executed.
        exchange_rate: Quoted rate, foreign -> local.
        foreign_amount: Amount withdrawn in foreign currency.
        vet: Effective rate after fees and taxes (VET).
        final_local_amount: Amount credited in local currency.
        created_at: Creation timestamp.
        updated_at: Last upsert timestamp.
    """

    id: int
    participant_id: int
    month: int
    year: int
    conversion_date: date
    exchange_rate: Decimal
    foreign_amount: Decimal
    vet: Decimal
    final_local_amount: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def period(self) -> MonthKey:
        return MonthKey(self.year, self.month)
