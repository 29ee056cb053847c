import pytest
from datetime import date
from decimal import Decimal

from errors import NotFoundError, ValidationError


class TestSalaryConversionService:
    """Tests for SalaryConversionService."""

    def _record(self, services, participant_id, month=3, **overrides):
        values = {
            "exchange_rate": "5.464513",
            "foreign_amount": "4534.60",
            "vet": "5.437190",
            "final_local_amount": "24655.48",
        }
        values.update(overrides)
        if "conversion_date" not in values:
            values["conversion_date"] = date(2025, month, 5)
        return services.conversions.upsert(participant_id, month, 2025, **values)

    def test_record_conversion(self, services, household):
        """Test that a conversion is stored with its rates and amounts."""
        conversion = self._record(services, household["blue"].id)

        assert conversion.id is not None
        assert conversion.month == 3
        assert conversion.year == 2025
        assert conversion.conversion_date == date(2025, 3, 5)
        assert conversion.exchange_rate == Decimal("5.464513")
        assert conversion.vet == Decimal("5.437190")
        assert conversion.foreign_amount == Decimal("4534.60")
        assert conversion.final_local_amount == Decimal("24655.48")

    def test_recording_again_replaces(self, services, household):
        """Test that a second conversion for the same month replaces the first."""
        first = self._record(services, household["blue"].id)

        second = self._record(
            services, household["blue"].id, exchange_rate="5.5", final_local_amount="24900.00"
        )

        assert second.id == first.id
        assert second.exchange_rate == Decimal("5.5")
        assert second.final_local_amount == Decimal("24900.00")
        assert len(services.conversions.list_conversions(household["blue"].id, 2025)) == 1

    def test_rates_kept_to_six_places(self, services, household):
        """Test that rates are rounded half up to six decimal places."""
        conversion = self._record(
            services, household["blue"].id, exchange_rate="5.4645135", vet="5.4"
        )

        assert conversion.exchange_rate == Decimal("5.464514")
        assert conversion.vet == Decimal("5.4")

    def test_find_by_month(self, services, household):
        """Test the per-month lookup for each participant."""
        self._record(services, household["blue"].id, month=3)

        assert services.conversions.find_by_month(household["blue"].id, 3, 2025) is not None
        assert services.conversions.find_by_month(household["blue"].id, 4, 2025) is None
        assert services.conversions.find_by_month(household["pink"].id, 3, 2025) is None

    def test_list_conversions_in_month_order(self, services, household):
        """Test that a year's conversions are listed by month."""
        blue = household["blue"].id
        self._record(services, blue, month=7)
        self._record(services, blue, month=2)

        conversions = services.conversions.list_conversions(blue, 2025)

        assert [c.month for c in conversions] == [2, 7]
        assert services.conversions.list_conversions(blue, 2024) == []

    @pytest.mark.parametrize(
        "overrides",
        [
            {"exchange_rate": "0"},
            {"vet": "-1"},
            {"foreign_amount": "0"},
            {"final_local_amount": "-10"},
            {"conversion_date": "2025-03-05"},
        ],
    )
    def test_invalid_values_rejected(self, services, household, overrides):
        """Test that non-positive rates or amounts and non-date values are rejected."""
        with pytest.raises(ValidationError):
            self._record(services, household["blue"].id, **overrides)

        assert services.conversions.list_conversions(household["blue"].id, 2025) == []

    def test_invalid_month_rejected(self, services, household):
        """Test that month 13 is rejected."""
        with pytest.raises(ValidationError):
            self._record(
                services, household["blue"].id, month=13, conversion_date=date(2025, 1, 1)
            )

    def test_unknown_participant_rejected(self, services, household):
        """Test that the participant must exist."""
        with pytest.raises(ValidationError):
            self._record(services, 9999)

    def test_delete(self, services, household):
        """Test deleting a conversion and deleting an unknown one."""
        conversion = self._record(services, household["blue"].id)

        services.conversions.delete(conversion.id)

        assert services.conversions.find(conversion.id) is None
        with pytest.raises(NotFoundError):
            services.conversions.delete(conversion.id)
