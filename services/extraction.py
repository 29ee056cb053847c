"""Document extraction: LLM output treated as untrusted input.

Candidates go through the same validation as manually entered data. Nothing
is written until the caller saves the reviewed candidates.
"""

import re
from collections import defaultdict
from datetime import date
from typing import List, Optional

from errors import UpstreamUnavailable, ValidationError
from logger import get_logger
from models.deduction import Deduction
from models.expense import ExpenseEntry
from models.extraction import (
    CONFIDENCE_LEVELS,
    CandidateTransaction,
    DeductionCandidate,
    ExtractionResult,
    RejectedCandidate,
)
from money import ZERO, parse_amount

logger = get_logger()

_DOT_THOUSANDS = re.compile(r"\d{1,3}(\.\d{3})+")


def parse_document_date(value, field: str = "date") -> date:
    """Parse an ISO (YYYY-MM-DD) date from extraction output.

    Raises:
        ValidationError: If the value is missing or not a valid ISO date.
    """
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise ValidationError(f"{field} is missing", field)
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError(f"{field} is not a valid YYYY-MM-DD date: {value!r}", field)


def parse_positive_amount(value, field: str = "amount"):
    """Parse an extracted amount, tolerating a currency prefix ("R$ 1.234,56").

    Reais use the dot for thousands, so "R$ 1.234" is one thousand two
    hundred thirty-four.
    """
    if isinstance(value, str):
        in_reais = "R$" in value
        text = value.replace("R$", "").replace("US$", "").replace("$", "").strip()
        if "," in text and "." in text:
            # The right-most separator is the decimal one ("1.234,56" or "1,234.56")
            if text.rfind(",") > text.rfind("."):
                text = text.replace(".", "").replace(",", ".")
            else:
                text = text.replace(",", "")
        elif in_reais and _DOT_THOUSANDS.fullmatch(text):
            text = text.replace(".", "")
        value = text
    amount = parse_amount(value, field)
    if amount == ZERO:
        raise ValidationError(f"{field} must be positive", field)
    return amount


class DocumentExtractionService:
    """Extracts candidate transactions and deductions from document text.

    Args:
        provider: LLMProvider, or None when LLM features are disabled.
        categories: CategoryService.
        expenses: ExpenseLedger that confirmed transactions are added to.
        deductions: DeductionService that confirmed boletos are saved to.
        uncategorized_name: Category used when the LLM gives no known category.
    """

    def __init__(self, provider, categories, expenses, deductions, uncategorized_name="Other"):
        self.provider = provider
        self.categories = categories
        self.expenses = expenses
        self.deductions = deductions
        self.uncategorized_name = uncategorized_name

    def extract_transactions(self, text: str) -> ExtractionResult:
        """Read candidate transactions from statement or receipt text.

        Raises:
            UpstreamUnavailable: If LLM features are disabled or the provider
                cannot be reached.
        """
        provider = self._require_provider()
        categories = self.categories.find_all()
        known_ids = {c.id for c in categories}

        suggestions = provider.extract_transactions(text, categories)

        result = ExtractionResult()
        uncategorized = None
        for suggestion in suggestions:
            try:
                description = (suggestion.description or "").strip()
                if not description:
                    raise ValidationError("description is missing", "description")
                amount = parse_positive_amount(suggestion.amount)
                txn_date = parse_document_date(suggestion.date)
            except ValidationError as e:
                logger.warning(f"Rejected extracted transaction {suggestion.description!r}: {e}")
                result.rejected.append(RejectedCandidate(suggestion.description, str(e)))
                continue

            category_id = suggestion.category_id
            is_uncategorized = category_id not in known_ids
            if is_uncategorized:
                if uncategorized is None:
                    uncategorized = self.categories.get_or_create(self.uncategorized_name)
                category_id = uncategorized.id

            confidence = suggestion.confidence if suggestion.confidence in CONFIDENCE_LEVELS else "low"

            result.candidates.append(
                CandidateTransaction(
                    description=description,
                    amount=amount,
                    date=txn_date,
                    category_id=category_id,
                    confidence=confidence,
                    uncategorized=is_uncategorized,
                )
            )

        logger.info(
            f"Extracted {len(result.candidates)} candidate transaction(s), "
            f"rejected {len(result.rejected)}"
        )
        return result

    def extract_deduction(self, text: str) -> DeductionCandidate:
        """Read boleto fields from document text.

        Raises:
            UpstreamUnavailable: If LLM features are disabled or the provider
                cannot be reached.
            ValidationError: If a field is missing or invalid.
        """
        provider = self._require_provider()
        suggestion = provider.extract_deduction(text)

        description = (suggestion.description or "").strip()
        if not description:
            raise ValidationError("Boleto description not found", "description")

        return DeductionCandidate(
            description=description,
            amount=parse_positive_amount(suggestion.amount),
            due_date=parse_document_date(suggestion.due_date, "due_date"),
        )

    def save_transactions(
        self, participant_id: int, candidates: List[CandidateTransaction]
    ) -> List[ExpenseEntry]:
        """Add reviewed candidates to the ledger.

        Amounts are grouped per (category, month, year) of the transaction
        date and added onto the existing ledger entry for that tuple.

        Returns:
            The resulting ledger entries.
        """
        grouped = defaultdict(lambda: ZERO)
        for candidate in candidates:
            key = (candidate.category_id, candidate.date.month, candidate.date.year)
            grouped[key] += candidate.amount

        entries = [
            self.expenses.add_amount(participant_id, category_id, amount, month, year)
            for (category_id, month, year), amount in sorted(grouped.items())
        ]
        logger.info(
            f"Saved {len(candidates)} extracted transaction(s) into {len(entries)} ledger entries"
        )
        return entries

    def save_deduction(
        self,
        participant_id: int,
        candidate: DeductionCandidate,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Deduction:
        """Save a reviewed boleto as a deduction (defaults to its due month)."""
        return self.deductions.create(
            participant_id,
            candidate.description,
            candidate.amount,
            candidate.due_date,
            month=month,
            year=year,
        )

    def _require_provider(self):
        if self.provider is None:
            raise UpstreamUnavailable(
                "Document extraction needs the LLM provider; enable it in the config"
            )
        return self.provider
