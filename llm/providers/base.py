"""Base provider interface for LLM implementations."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional
from dataclasses import dataclass
from models.category import Category


@dataclass
class TransactionSuggestion:
    """A transaction the LLM found in a statement or receipt.

    Fields are raw provider output and must be validated before use.
    """

    description: Optional[str]
    amount: Optional[str]
    date: Optional[str]  # ISO format, YYYY-MM-DD
    category_id: Optional[int] = None
    confidence: Optional[str] = None  # "high", "medium" or "low"


@dataclass
class DeductionSuggestion:
    """Boleto fields the LLM found in a document. Unvalidated."""

    description: Optional[str]
    amount: Optional[str]
    due_date: Optional[str]  # ISO format, YYYY-MM-DD


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    Implementations raise errors.UpstreamUnavailable when the service cannot
    be reached or returns nothing usable.
    """

    @abstractmethod
    def extract_transactions(
        self, text: str, categories: List[Category]
    ) -> List[TransactionSuggestion]:
        """Find candidate transactions in document text.

        Args:
            text: Text of a bank statement or receipt.
            categories: Available categories the LLM may assign.

        Returns:
            List of TransactionSuggestion objects (possibly empty).
        """
        pass

    @abstractmethod
    def extract_deduction(self, text: str) -> DeductionSuggestion:
        """Read description, amount and due date from boleto text."""
        pass

    @abstractmethod
    def fetch_exchange_rate(self, base: str, quote: str) -> Decimal:
        """Get the current rate for converting ``base`` into ``quote``."""
        pass
