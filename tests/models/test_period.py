import pytest
from datetime import date

from errors import ValidationError
from models.period import MonthKey, months_between, validate_period, year_months


class TestMonthKey:
    """Tests for MonthKey."""

    def test_previous_wraps_to_december(self):
        """Test that January's previous month is December of the prior year."""
        assert MonthKey(2025, 1).previous() == MonthKey(2024, 12)

    def test_next_wraps_to_january(self):
        """Test that December's next month is January of the next year."""
        assert MonthKey(2024, 12).next() == MonthKey(2025, 1)

    def test_last_day_handles_leap_year(self):
        """Test last_day for February in leap and common years."""
        assert MonthKey(2024, 2).last_day == date(2024, 2, 29)
        assert MonthKey(2025, 2).last_day == date(2025, 2, 28)

    def test_business_days_february_2025(self):
        """Test that February 2025 has 20 business days."""
        assert MonthKey(2025, 2).business_days() == 20

    def test_business_days_march_2025(self):
        """Test that March 2025 has 21 business days."""
        assert MonthKey(2025, 3).business_days() == 21

    def test_ordering(self):
        """Test that months order chronologically across years."""
        assert MonthKey(2024, 12) < MonthKey(2025, 1)
        assert sorted([MonthKey(2025, 3), MonthKey(2024, 11)]) == [
            MonthKey(2024, 11),
            MonthKey(2025, 3),
        ]

    def test_str(self):
        """Test the YYYY/MM display format."""
        assert str(MonthKey(2025, 3)) == "2025/03"

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_invalid_month_rejected(self, month):
        """Test that months outside 1-12 raise ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            MonthKey(2025, month)
        assert exc_info.value.field == "month"

    def test_invalid_year_rejected(self):
        """Test that a non four-digit year raises ValidationError."""
        with pytest.raises(ValidationError):
            validate_period(1, 25)


class TestMonthsBetween:
    """Tests for months_between."""

    def test_partial_months_included(self):
        """Test that a Jan 15 - Mar 10 range covers three months."""
        months = months_between(date(2025, 1, 15), date(2025, 3, 10))

        assert months == [MonthKey(2025, 1), MonthKey(2025, 2), MonthKey(2025, 3)]

    def test_crosses_year_boundary(self):
        """Test that a Nov - Feb range covers four months across the year."""
        months = months_between(date(2024, 11, 1), date(2025, 2, 28))

        assert [str(m) for m in months] == ["2024/11", "2024/12", "2025/01", "2025/02"]

    def test_single_day(self):
        """Test that a one-day range covers its month."""
        assert months_between(date(2025, 5, 5), date(2025, 5, 5)) == [MonthKey(2025, 5)]

    def test_start_after_end_rejected(self):
        """Test that an inverted range raises ValidationError."""
        with pytest.raises(ValidationError):
            months_between(date(2025, 3, 1), date(2025, 1, 1))


def test_year_months():
    """Test that year_months yields January through December."""
    months = list(year_months(2025))

    assert len(months) == 12
    assert months[0] == MonthKey(2025, 1)
    assert months[-1] == MonthKey(2025, 12)
