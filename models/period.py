"""MonthKey: the (year, month) value used to group every ledger fact."""

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Iterator, List
from dateutil.relativedelta import relativedelta

from errors import ValidationError


def validate_period(month: int, year: int) -> None:
    """Check that month is 1-12 and year has four digits.

    Raises:
        ValidationError: If either value is out of range.
    """
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise ValidationError(f"month must be between 1 and 12, got {month!r}", "month")
    if isinstance(year, bool) or not isinstance(year, int) or not 1000 <= year <= 9999:
        raise ValidationError(f"year must have four digits, got {year!r}", "year")


@dataclass(frozen=True, order=True)
class MonthKey:
    """A calendar month.

    Attributes:
        year: Four-digit year.
        month: Month number (1-12).
    """

    year: int
    month: int

    def __post_init__(self):
        validate_period(self.month, self.year)

    @classmethod
    def from_date(cls, d: date) -> "MonthKey":
        return cls(d.year, d.month)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return self.first_day + relativedelta(day=31)

    def shift(self, months: int) -> "MonthKey":
        """The month ``months`` away (negative goes back)."""
        return MonthKey.from_date(self.first_day + relativedelta(months=months))

    def previous(self) -> "MonthKey":
        return self.shift(-1)

    def next(self) -> "MonthKey":
        return self.shift(1)

    def business_days(self) -> int:
        """Count Monday-Friday days in this month (holidays are not excluded)."""
        _, days_in_month = calendar.monthrange(self.year, self.month)
        return sum(
            1
            for day in range(1, days_in_month + 1)
            if calendar.weekday(self.year, self.month, day) < 5
        )

    def __str__(self) -> str:
        return f"{self.year:04d}/{self.month:02d}"


def months_between(start_date: date, end_date: date) -> List[MonthKey]:
    """List every month touched by the inclusive range [start_date, end_date].

    Partial first and last months are included.

    Raises:
        ValidationError: If start_date is after end_date.
    """
    if start_date > end_date:
        raise ValidationError(
            f"start date {start_date} is after end date {end_date}", "start_date"
        )

    months = []
    current = MonthKey.from_date(start_date)
    last = MonthKey.from_date(end_date)
    while current <= last:
        months.append(current)
        current = current.next()
    return months


def year_months(year: int) -> Iterator[MonthKey]:
    """Yield January through December of the given year."""
    for month in range(1, 13):
        yield MonthKey(year, month)
