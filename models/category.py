"""Expense category model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Category:
    """A named classification for ledger entries (e.g. "Rent", "Groceries").

    Attributes:
        id: Unique identifier (auto-generated).
        name: Category name (unique).
        created_at: Timestamp when the category was created.
    """

    id: int
    name: str
    created_at: Optional[datetime] = None
