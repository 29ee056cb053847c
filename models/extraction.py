"""Validated results of document extraction, awaiting user confirmation."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

CONFIDENCE_LEVELS = ("high", "medium", "low")


@dataclass
class CandidateTransaction:
    """A validated transaction read from a document.

    Attributes:
        description: Merchant or description as printed.
        amount: Positive amount in local currency.
        date: Transaction date.
        category_id: Known category, or the uncategorized fallback.
        confidence: "high", "medium" or "low".
        uncategorized: True when the category fell back to uncategorized.
    """

    description: str
    amount: Decimal
    date: date
    category_id: int
    confidence: str = "low"
    uncategorized: bool = False


@dataclass
class RejectedCandidate:
    description: Optional[str]
    reason: str


@dataclass
class ExtractionResult:
    candidates: List[CandidateTransaction] = field(default_factory=list)
    rejected: List[RejectedCandidate] = field(default_factory=list)


@dataclass
class DeductionCandidate:
    """Validated boleto fields ready to be saved as a Deduction."""

    description: str
    amount: Decimal
    due_date: date
