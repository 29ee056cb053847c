import pytest
from datetime import date
from decimal import Decimal

from errors import NotFoundError, ValidationError


class TestDeductionService:
    """Tests for DeductionService."""

    def test_create_defaults_period_to_due_date(self, services, household):
        """Test that month and year default to the due date's."""
        deduction = services.deductions.create(
            household["blue"].id, "IPTU", "350.75", date(2025, 3, 10)
        )

        assert deduction.id is not None
        assert deduction.description == "IPTU"
        assert deduction.amount == Decimal("350.75")
        assert deduction.due_date == date(2025, 3, 10)
        assert (deduction.month, deduction.year) == (3, 2025)

    def test_create_with_explicit_period(self, services, household):
        """Test that a deduction can be charged to a month other than its due month."""
        deduction = services.deductions.create(
            household["blue"].id, "Condo", "900", date(2025, 4, 5), month=3, year=2025
        )

        assert (deduction.month, deduction.year) == (3, 2025)

    def test_sum_deductions(self, services, household):
        """Test the monthly sum, scoped to participant and month."""
        blue, pink = household["blue"].id, household["pink"].id
        services.deductions.create(blue, "IPTU", "300.00", date(2025, 3, 10))
        services.deductions.create(blue, "Internet", "200.00", date(2025, 3, 20))
        services.deductions.create(blue, "April bill", "50.00", date(2025, 4, 1))
        services.deductions.create(pink, "Gym", "99.90", date(2025, 3, 5))

        assert services.deductions.sum_deductions(blue, 3, 2025) == Decimal("500.00")
        assert services.deductions.sum_deductions(pink, 3, 2025) == Decimal("99.90")
        assert services.deductions.sum_deductions(pink, 4, 2025) == Decimal("0.00")

    def test_list_deductions_ordered_by_due_date(self, services, household):
        """Test that a month's deductions come back in due-date order."""
        blue = household["blue"].id
        services.deductions.create(blue, "Late", "1", date(2025, 3, 25))
        services.deductions.create(blue, "Early", "1", date(2025, 3, 2))

        descriptions = [d.description for d in services.deductions.list_deductions(blue, 3, 2025)]

        assert descriptions == ["Early", "Late"]

    @pytest.mark.parametrize(
        "description, amount, due_date",
        [
            ("", "10", date(2025, 3, 1)),
            ("IPTU", "0", date(2025, 3, 1)),
            ("IPTU", "-10", date(2025, 3, 1)),
            ("IPTU", "10", "2025-03-01"),
        ],
    )
    def test_invalid_input_rejected(self, services, household, description, amount, due_date):
        """Test that empty descriptions, non-positive amounts and non-dates are rejected."""
        with pytest.raises(ValidationError):
            services.deductions.create(household["blue"].id, description, amount, due_date)

    def test_unknown_participant_rejected(self, services, household):
        """Test that a deduction needs an existing participant."""
        with pytest.raises(ValidationError):
            services.deductions.create(9999, "IPTU", "10", date(2025, 3, 1))

    def test_delete(self, services, household):
        """Test deleting a deduction."""
        deduction = services.deductions.create(
            household["blue"].id, "IPTU", "10", date(2025, 3, 1)
        )

        services.deductions.delete(deduction.id)

        assert services.deductions.find(deduction.id) is None
        with pytest.raises(NotFoundError):
            services.deductions.delete(deduction.id)
