"""Helper utilities for tests."""

from decimal import Decimal

from errors import UpstreamUnavailable
from llm.providers.base import DeductionSuggestion, LLMProvider


class FakeLLMProvider(LLMProvider):
    """LLM provider whose answers are set by the test.

    Attributes:
        transactions: Suggestions returned by extract_transactions.
        deduction: Suggestion returned by extract_deduction.
        rate: Rate returned by fetch_exchange_rate, or an exception to raise.
        calls: Names of the methods called, in order.
    """

    def __init__(self):
        self.transactions = []
        self.deduction = DeductionSuggestion(None, None, None)
        self.rate = UpstreamUnavailable("no rate scripted")
        self.calls = []

    def extract_transactions(self, text, categories):
        self.calls.append("extract_transactions")
        return list(self.transactions)

    def extract_deduction(self, text):
        self.calls.append("extract_deduction")
        return self.deduction

    def fetch_exchange_rate(self, base, quote) -> Decimal:
        self.calls.append("fetch_exchange_rate")
        if isinstance(self.rate, Exception):
            raise self.rate
        return self.rate
