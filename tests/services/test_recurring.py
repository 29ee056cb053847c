import pytest
from datetime import date
from decimal import Decimal

from errors import NotFoundError, ValidationError


class TestRecurringExpenseService:
    """Tests for RecurringExpenseService."""

    def _create(self, services, household, amount="500.00", start=None, end=None):
        return services.recurring.create(
            household["blue"].id,
            household["rent"].id,
            amount,
            start or date(2025, 1, 15),
            end or date(2025, 3, 10),
        )

    def test_create_materializes_each_month(self, services, household):
        """Test that Jan 15 - Mar 10 writes one entry for Jan, Feb and Mar."""
        template = self._create(services, household)

        entries = services.expenses.find_by_template(template.id)

        assert [(e.year, e.month) for e in entries] == [(2025, 1), (2025, 2), (2025, 3)]
        assert all(e.amount == Decimal("500.00") for e in entries)
        assert all(e.participant_id == household["blue"].id for e in entries)

    def test_create_across_year_boundary(self, services, household):
        """Test that Nov 2024 - Feb 2025 writes four entries across two years."""
        template = self._create(
            services, household, start=date(2024, 11, 1), end=date(2025, 2, 28)
        )

        entries = services.expenses.find_by_template(template.id)

        assert [(e.year, e.month) for e in entries] == [
            (2024, 11),
            (2024, 12),
            (2025, 1),
            (2025, 2),
        ]

    def test_materialize_keeps_manual_entries(self, services, household):
        """Test that a template leaves a month already entered by hand alone."""
        services.expenses.upsert_expense(
            household["blue"].id, household["rent"].id, "999.00", 2, 2025
        )

        template = self._create(services, household)

        entries = services.expenses.list_expenses(2025, 2)
        assert len(entries) == 1
        assert entries[0].amount == Decimal("999.00")
        assert entries[0].recurring_template_id is None
        assert [e.month for e in services.expenses.find_by_template(template.id)] == [1, 3]

    def test_hand_edited_month_survives_update(self, services, household):
        """Test that a month edited by hand keeps its value when the template changes."""
        template = self._create(
            services, household, start=date(2025, 1, 1), end=date(2025, 2, 28)
        )
        services.expenses.upsert_expense(
            household["blue"].id, household["rent"].id, "650.00", 1, 2025
        )

        services.recurring.update(
            template.id,
            household["blue"].id,
            household["rent"].id,
            "700.00",
            date(2025, 1, 1),
            date(2025, 2, 28),
        )

        january = services.expenses.list_expenses(2025, 1)
        assert [e.amount for e in january] == [Decimal("650.00")]
        assert january[0].recurring_template_id is None
        entries = services.expenses.find_by_template(template.id)
        assert [(e.month, e.amount) for e in entries] == [(2, Decimal("700.00"))]

    def test_overlapping_template_rejected(self, services, household):
        """Test that a second template sharing a month with the first is rejected."""
        first = self._create(
            services, household, start=date(2025, 1, 1), end=date(2025, 3, 31)
        )

        with pytest.raises(ValidationError):
            self._create(
                services, household, amount="300.00",
                start=date(2025, 2, 1), end=date(2025, 2, 28),
            )

        assert [t.id for t in services.recurring.find_all()] == [first.id]
        assert services.expenses.total_by_month(2025, 2) == Decimal("500.00")

    def test_overlap_is_per_participant_and_category(self, services, household):
        """Test that adjacent ranges and other categories do not count as overlap."""
        self._create(services, household, start=date(2025, 1, 1), end=date(2025, 2, 28))

        self._create(services, household, start=date(2025, 3, 1), end=date(2025, 4, 30))
        services.recurring.create(
            household["blue"].id,
            household["groceries"].id,
            "200.00",
            date(2025, 1, 1),
            date(2025, 4, 30),
        )
        services.recurring.create(
            household["pink"].id,
            household["rent"].id,
            "200.00",
            date(2025, 1, 1),
            date(2025, 4, 30),
        )

        assert len(services.recurring.find_all()) == 4

    def test_update_into_overlap_rejected(self, services, household):
        """Test that an edit cannot stretch a template over another one."""
        self._create(services, household, start=date(2025, 1, 1), end=date(2025, 2, 28))
        later = self._create(
            services, household, start=date(2025, 3, 1), end=date(2025, 4, 30)
        )

        with pytest.raises(ValidationError):
            services.recurring.update(
                later.id,
                household["blue"].id,
                household["rent"].id,
                "500.00",
                date(2025, 2, 1),
                date(2025, 4, 30),
            )

        entries = services.expenses.find_by_template(later.id)
        assert [e.month for e in entries] == [3, 4]

    def test_update_may_keep_own_range(self, services, household):
        """Test that a template does not overlap with itself on update."""
        template = self._create(services, household)

        services.recurring.update(
            template.id,
            household["blue"].id,
            household["rent"].id,
            "550.00",
            date(2025, 1, 15),
            date(2025, 3, 10),
        )

        assert services.expenses.total_by_month(2025, 2) == Decimal("550.00")

    def test_start_after_end_rejected(self, services, household):
        """Test that an inverted range is rejected and nothing is written."""
        with pytest.raises(ValidationError):
            self._create(services, household, start=date(2025, 3, 1), end=date(2025, 1, 1))

        assert services.recurring.find_all() == []
        assert services.expenses.list_expenses(2025) == []

    @pytest.mark.parametrize("amount", ["0", "-100"])
    def test_non_positive_amount_rejected(self, services, household, amount):
        """Test that a template needs a positive monthly amount."""
        with pytest.raises(ValidationError):
            self._create(services, household, amount=amount)

    def test_update_rematerializes(self, services, household):
        """Test that editing a template replaces its entries with the new range."""
        template = self._create(services, household)

        services.recurring.update(
            template.id,
            household["blue"].id,
            household["rent"].id,
            "700.00",
            date(2025, 3, 1),
            date(2025, 4, 30),
        )

        entries = services.expenses.find_by_template(template.id)
        assert [(e.month, e.amount) for e in entries] == [
            (3, Decimal("700.00")),
            (4, Decimal("700.00")),
        ]
        assert services.expenses.list_expenses(2025, 1) == []

    def test_update_missing_template(self, services, household):
        """Test that updating an unknown template raises NotFoundError."""
        with pytest.raises(NotFoundError):
            services.recurring.update(
                9999,
                household["blue"].id,
                household["rent"].id,
                "1",
                date(2025, 1, 1),
                date(2025, 1, 1),
            )

    def test_delete_removes_entries(self, services, household):
        """Test that deleting a template deletes the entries it materialized."""
        template = self._create(services, household)
        services.expenses.upsert_expense(
            household["pink"].id, household["rent"].id, "800.00", 2, 2025
        )

        removed = services.recurring.delete(template.id)

        assert removed == 3
        assert services.recurring.find(template.id) is None
        remaining = services.expenses.list_expenses(2025)
        assert [e.participant_id for e in remaining] == [household["pink"].id]

    def test_covered_months(self, services, household):
        """Test the template's covered months."""
        template = self._create(services, household)

        assert [str(m) for m in template.covered_months()] == [
            "2025/01",
            "2025/02",
            "2025/03",
        ]
