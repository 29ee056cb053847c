import pytest
from datetime import date

from errors import NotFoundError, ValidationError


class TestCategoryService:
    """Tests for CategoryService."""

    def test_create_category(self, services):
        """Test creating a category."""
        category = services.categories.create("Groceries")

        assert category.id is not None
        assert category.id > 0
        assert category.name == "Groceries"

    def test_create_strips_whitespace(self, services):
        """Test that surrounding whitespace is removed from names."""
        assert services.categories.create("  Rent ").name == "Rent"

    def test_duplicate_name_rejected(self, services):
        """Test that category names are unique."""
        services.categories.create("Rent")

        with pytest.raises(ValidationError):
            services.categories.create("Rent")

    def test_empty_name_rejected(self, services):
        """Test that an empty name is rejected."""
        with pytest.raises(ValidationError):
            services.categories.create("")

    def test_find_by_name_case_sensitive(self, services):
        """Test that category name lookup is case-sensitive."""
        services.categories.create("Shopping")

        assert services.categories.find_by_name("shopping") is None
        assert services.categories.find_by_name("Shopping") is not None

    def test_find_all_ordered_by_name(self, services):
        """Test that find_all returns categories ordered by name."""
        services.categories.create("Utilities")
        services.categories.create("Groceries")
        services.categories.create("Rent")

        names = [c.name for c in services.categories.find_all()]

        assert names == ["Groceries", "Rent", "Utilities"]

    def test_find_all_empty(self, services):
        """Test finding all categories when database is empty."""
        assert services.categories.find_all() == []

    def test_get_or_create(self, services):
        """Test get_or_create returns the existing category or a new one."""
        first = services.categories.get_or_create("Other")
        second = services.categories.get_or_create("Other")

        assert first.id == second.id
        assert len(services.categories.find_all()) == 1

    def test_update_renames(self, services):
        """Test renaming a category."""
        category = services.categories.create("Food")

        updated = services.categories.update(category.id, "Groceries")

        assert updated.id == category.id
        assert updated.name == "Groceries"

    def test_update_to_taken_name_rejected(self, services):
        """Test that renaming onto another category's name is rejected."""
        services.categories.create("Rent")
        food = services.categories.create("Food")

        with pytest.raises(ValidationError):
            services.categories.update(food.id, "Rent")

    def test_update_keeps_own_name(self, services):
        """Test that renaming a category to its current name is allowed."""
        rent = services.categories.create("Rent")

        assert services.categories.update(rent.id, "Rent").name == "Rent"

    def test_delete_unused_category(self, services):
        """Test deleting a category with no entries."""
        category = services.categories.create("Temporary")

        services.categories.delete(category.id)

        assert services.categories.find(category.id) is None

    def test_delete_missing_category(self, services):
        """Test that deleting an unknown category raises NotFoundError."""
        with pytest.raises(NotFoundError):
            services.categories.delete(9999)

    def test_delete_blocked_by_expense(self, services, household):
        """Test that a category with ledger entries cannot be deleted."""
        services.expenses.upsert_expense(
            household["blue"].id, household["rent"].id, "1200.00", 3, 2025
        )

        with pytest.raises(ValidationError):
            services.categories.delete(household["rent"].id)

        assert services.categories.find(household["rent"].id) is not None
        assert len(services.expenses.list_expenses(2025, 3)) == 1

    def test_delete_blocked_by_template(self, services, household):
        """Test that a category used by a recurring template cannot be deleted."""
        template = services.recurring.create(
            household["blue"].id,
            household["groceries"].id,
            "100",
            date(2025, 1, 1),
            date(2025, 1, 31),
        )
        # Detach the only entry so just the template references the category
        services.expenses.upsert_expense(
            household["blue"].id, household["groceries"].id, "0", 1, 2025
        )
        assert services.expenses.find_by_template(template.id) == []

        with pytest.raises(ValidationError):
            services.categories.delete(household["groceries"].id)
