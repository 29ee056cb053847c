import pytest
from datetime import date
from decimal import Decimal

from errors import UpstreamUnavailable, ValidationError
from llm.providers.base import DeductionSuggestion, TransactionSuggestion
from models.extraction import CandidateTransaction, DeductionCandidate
from services.base import Services
from services.extraction import parse_document_date, parse_positive_amount


class TestExtractTransactions:
    """Tests for DocumentExtractionService.extract_transactions."""

    def test_valid_candidates(self, services, household, fake_llm):
        """Test that valid suggestions become candidates with their category."""
        fake_llm.transactions = [
            TransactionSuggestion("Supermercado", "R$ 1.234,56", "2025-03-05", household["groceries"].id, "high"),
            TransactionSuggestion("Aluguel", "1200.00", "2025-03-01", household["rent"].id, "medium"),
        ]

        result = services.extraction.extract_transactions("statement text")

        assert result.rejected == []
        assert [c.amount for c in result.candidates] == [Decimal("1234.56"), Decimal("1200.00")]
        assert result.candidates[0].date == date(2025, 3, 5)
        assert result.candidates[0].category_id == household["groceries"].id
        assert result.candidates[0].confidence == "high"
        assert result.candidates[0].uncategorized is False

    def test_invalid_candidates_rejected(self, services, household, fake_llm):
        """Test that bad amounts, dates and descriptions are rejected with a reason."""
        fake_llm.transactions = [
            TransactionSuggestion("Refund", "-10.00", "2025-03-05"),
            TransactionSuggestion("Free sample", "0", "2025-03-05"),
            TransactionSuggestion("Bakery", "12.00", "05/03/2025"),
            TransactionSuggestion("", "12.00", "2025-03-05"),
            TransactionSuggestion("Pharmacy", "45,90", "2025-03-06", household["groceries"].id),
        ]

        result = services.extraction.extract_transactions("statement text")

        assert len(result.rejected) == 4
        assert all(r.reason for r in result.rejected)
        assert [c.description for c in result.candidates] == ["Pharmacy"]
        assert result.candidates[0].amount == Decimal("45.90")

    def test_unknown_category_maps_to_uncategorized(self, services, household, fake_llm):
        """Test that unknown or missing categories map to the configured fallback."""
        fake_llm.transactions = [
            TransactionSuggestion("Mystery", "10", "2025-03-05", 9999),
            TransactionSuggestion("Unknown", "20", "2025-03-05", None, "certain"),
        ]

        result = services.extraction.extract_transactions("statement text")

        other = services.categories.find_by_name("Other")
        assert other is not None
        assert {c.category_id for c in result.candidates} == {other.id}
        assert all(c.uncategorized for c in result.candidates)
        assert result.candidates[1].confidence == "low"

    def test_nothing_saved_on_extract(self, services, household, fake_llm):
        """Test that extraction alone does not touch the ledger."""
        fake_llm.transactions = [
            TransactionSuggestion("Aluguel", "1200.00", "2025-03-01", household["rent"].id),
        ]

        services.extraction.extract_transactions("statement text")

        assert services.expenses.list_expenses(2025) == []

    def test_provider_disabled(self, test_config, db_manager_with_schema):
        """Test that extraction without a provider raises UpstreamUnavailable."""
        services = Services(test_config, db_manager=db_manager_with_schema)

        assert services.llm_provider is None
        with pytest.raises(UpstreamUnavailable):
            services.extraction.extract_transactions("statement text")

    def test_provider_failure_propagates(self, services, fake_llm):
        """Test that an unreachable provider raises UpstreamUnavailable."""

        def fail(text, categories):
            raise UpstreamUnavailable("timeout")

        fake_llm.extract_transactions = fail

        with pytest.raises(UpstreamUnavailable):
            services.extraction.extract_transactions("statement text")


class TestSaveTransactions:
    """Tests for DocumentExtractionService.save_transactions."""

    def test_aggregates_per_category_and_month(self, services, household):
        """Test that confirmed candidates add into one entry per category and month."""
        blue, groceries = household["blue"].id, household["groceries"].id
        services.expenses.upsert_expense(blue, groceries, "100.00", 3, 2025)
        candidates = [
            CandidateTransaction("Market", Decimal("10.50"), date(2025, 3, 2), groceries),
            CandidateTransaction("Bakery", Decimal("4.50"), date(2025, 3, 20), groceries),
            CandidateTransaction("Market", Decimal("30.00"), date(2025, 4, 1), groceries),
        ]

        entries = services.extraction.save_transactions(blue, candidates)

        assert len(entries) == 2
        assert services.expenses.list_expenses(2025, 3)[0].amount == Decimal("115.00")
        assert services.expenses.list_expenses(2025, 4)[0].amount == Decimal("30.00")


class TestExtractDeduction:
    """Tests for extracting and saving boletos."""

    def test_extract_and_save(self, services, household, fake_llm):
        """Test that a valid boleto is saved to its due month."""
        fake_llm.deduction = DeductionSuggestion("IPTU 2025", "R$ 350,75", "2025-03-10")

        candidate = services.extraction.extract_deduction("boleto text")
        deduction = services.extraction.save_deduction(household["blue"].id, candidate)

        assert candidate == DeductionCandidate("IPTU 2025", Decimal("350.75"), date(2025, 3, 10))
        assert (deduction.month, deduction.year) == (3, 2025)
        assert services.deductions.sum_deductions(household["blue"].id, 3, 2025) == Decimal("350.75")

    @pytest.mark.parametrize(
        "suggestion",
        [
            DeductionSuggestion(None, "10", "2025-03-10"),
            DeductionSuggestion("IPTU", None, "2025-03-10"),
            DeductionSuggestion("IPTU", "10", None),
            DeductionSuggestion("IPTU", "10", "2025-02-30"),
        ],
    )
    def test_invalid_boleto_rejected(self, services, fake_llm, suggestion):
        """Test that a missing or invalid field raises ValidationError."""
        fake_llm.deduction = suggestion

        with pytest.raises(ValidationError):
            services.extraction.extract_deduction("boleto text")


def test_parse_document_date():
    """Test ISO parsing and rejection of other formats."""
    assert parse_document_date("2025-03-05") == date(2025, 3, 5)
    with pytest.raises(ValidationError):
        parse_document_date("March 5")


def test_parse_positive_amount_formats():
    """Test the currency formats found on Brazilian documents."""
    assert parse_positive_amount("R$ 1.234,56") == Decimal("1234.56")
    assert parse_positive_amount("US$ 1,099.90") == Decimal("1099.90")
    assert parse_positive_amount("12,5") == Decimal("12.50")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("R$ 1.234", Decimal("1234.00")),
        ("R$1.234.567", Decimal("1234567.00")),
        ("R$ 12.50", Decimal("12.50")),
        ("1.234", Decimal("1.23")),
    ],
)
def test_parse_positive_amount_dot_thousands_in_reais(raw, expected):
    """Test that a dot followed by three digits groups thousands only for reais."""
    assert parse_positive_amount(raw) == expected
