"""Category service for database operations."""

from datetime import datetime
from typing import List, Optional

from errors import NotFoundError, ValidationError
from logger import get_logger
from models.category import Category

logger = get_logger()


class CategoryService:
    """Service for managing expense categories."""

    def __init__(self, db_manager):
        """Initialize the category service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self) -> List[Category]:
        """Get all categories from the database.

        Returns:
            List of Category objects, ordered by name.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT id, name, created_at FROM categories ORDER BY name"
            )
            return [self._row_to_category(row) for row in cursor.fetchall()]

    def find(self, category_id: int) -> Optional[Category]:
        """Get a single category by ID.

        Args:
            category_id: The category ID to find.

        Returns:
            Category object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT id, name, created_at FROM categories WHERE id = ?",
                (category_id,),
            )
            row = cursor.fetchone()
            return self._row_to_category(row) if row else None

    def find_by_name(self, name: str) -> Optional[Category]:
        """Get a single category by name (case-sensitive)."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT id, name, created_at FROM categories WHERE name = ?",
                (name,),
            )
            row = cursor.fetchone()
            return self._row_to_category(row) if row else None

    def get(self, category_id: int) -> Category:
        """Get a category by ID or raise NotFoundError."""
        category = self.find(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    def get_or_create(self, name: str) -> Category:
        """Find a category by name, creating it when missing."""
        return self.find_by_name(name) or self.create(name)

    def create(self, name: str) -> Category:
        """Create a new category.

        Args:
            name: Category name (must be unique).

        Returns:
            The created Category object with id populated.

        Raises:
            ValidationError: If the name is empty or already taken.
        """
        name = self._clean_name(name)

        with self.db_manager.connect() as conn:
            cursor = conn.execute("INSERT INTO categories (name) VALUES (?)", (name,))
            conn.commit()
            category_id = cursor.lastrowid

        logger.debug(f"Created category '{name}' (ID: {category_id})")
        return self.get(category_id)

    def update(self, category_id: int, name: str) -> Category:
        """Rename an existing category.

        Raises:
            NotFoundError: If the category does not exist.
            ValidationError: If the new name is empty or taken by another category.
        """
        self.get(category_id)
        name = self._clean_name(name, exclude_id=category_id)

        with self.db_manager.connect() as conn:
            conn.execute(
                "UPDATE categories SET name = ? WHERE id = ?", (name, category_id)
            )
            conn.commit()

        return self.get(category_id)

    def delete(self, category_id: int) -> None:
        """Delete a category by ID.

        Deletion is blocked while any expense entry or recurring template
        still references the category.

        Raises:
            NotFoundError: If the category does not exist.
            ValidationError: If the category is still in use.
        """
        category = self.get(category_id)

        with self.db_manager.connect() as conn:
            expense_count = conn.execute(
                "SELECT COUNT(*) FROM expenses WHERE category_id = ?", (category_id,)
            ).fetchone()[0]
            template_count = conn.execute(
                "SELECT COUNT(*) FROM recurring_templates WHERE category_id = ?",
                (category_id,),
            ).fetchone()[0]

            if expense_count or template_count:
                raise ValidationError(
                    f"Category '{category.name}' is in use by {expense_count} "
                    f"expense entries and {template_count} recurring templates",
                    "category_id",
                )

            conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
            conn.commit()

        logger.debug(f"Deleted category '{category.name}' (ID: {category_id})")

    def _clean_name(self, name: str, exclude_id: Optional[int] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name cannot be empty", "name")
        existing = self.find_by_name(name)
        if existing and existing.id != exclude_id:
            raise ValidationError(f"Category '{name}' already exists", "name")
        return name

    def _row_to_category(self, row: tuple) -> Category:
        return Category(
            id=row[0],
            name=row[1],
            created_at=datetime.fromisoformat(row[2]) if row[2] else None,
        )
