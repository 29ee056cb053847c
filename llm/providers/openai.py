"""OpenAI provider implementation using structured outputs."""

from decimal import Decimal, InvalidOperation
from typing import List, Literal, Optional
from pydantic import BaseModel
from openai import OpenAI, OpenAIError
from errors import UpstreamUnavailable
from llm.providers.base import DeductionSuggestion, LLMProvider, TransactionSuggestion
from llm.prompts.loader import PromptManager
from models.category import Category
from logger import get_logger

logger = get_logger()


# Pydantic models for structured output
class ExtractedTransaction(BaseModel):
    """Single transaction found in a document."""

    description: str
    amount: str
    date: str
    category_id: Optional[int] = None
    confidence: Literal["high", "medium", "low"] = "low"


class TransactionExtractionResponse(BaseModel):
    transactions: List[ExtractedTransaction]


class DeductionExtractionResponse(BaseModel):
    description: Optional[str] = None
    amount: Optional[str] = None
    due_date: Optional[str] = None


class ExchangeRateResponse(BaseModel):
    rate: str


class OpenAIProvider(LLMProvider):
    """OpenAI implementation using structured outputs for reliable JSON parsing."""

    def __init__(self, api_key: str, model: Optional[str] = None, client=None):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key.
            model: Model to use (e.g., "gpt-4o-mini"). If None, uses prompt default.
            client: Optional pre-built client (used by tests).
        """
        self.client = client or OpenAI(api_key=api_key)
        self.model = model
        self.prompt_manager = PromptManager()

    def extract_transactions(
        self, text: str, categories: List[Category]
    ) -> List[TransactionSuggestion]:
        """Extract candidate transactions from statement or receipt text.

        Raises:
            UpstreamUnavailable: If the OpenAI call fails.
        """
        if not text.strip():
            return []

        result = self._parse(
            "transaction_extraction",
            {"categories": self._format_categories(categories), "document": text},
            TransactionExtractionResponse,
        )

        suggestions = [
            TransactionSuggestion(
                description=t.description,
                amount=t.amount,
                date=t.date,
                category_id=t.category_id,
                confidence=t.confidence,
            )
            for t in result.transactions
        ]
        logger.info(f"OpenAI found {len(suggestions)} candidate transaction(s)")
        return suggestions

    def extract_deduction(self, text: str) -> DeductionSuggestion:
        """Extract boleto fields from document text.

        Raises:
            UpstreamUnavailable: If the OpenAI call fails.
        """
        result = self._parse(
            "deduction_extraction", {"document": text}, DeductionExtractionResponse
        )
        return DeductionSuggestion(
            description=result.description,
            amount=result.amount,
            due_date=result.due_date,
        )

    def fetch_exchange_rate(self, base: str, quote: str) -> Decimal:
        """Ask the model for the current base -> quote rate.

        Raises:
            UpstreamUnavailable: If the call fails or the answer is not a number.
        """
        result = self._parse(
            "exchange_rate", {"base": base, "quote": quote}, ExchangeRateResponse
        )
        try:
            rate = Decimal(result.rate.strip().replace(",", "."))
        except InvalidOperation:
            raise UpstreamUnavailable(f"OpenAI returned a non-numeric rate: {result.rate!r}")
        logger.info(f"OpenAI exchange rate {base}->{quote}: {rate}")
        return rate

    def _parse(self, prompt_name: str, variables: dict, response_format):
        """Render a prompt, call OpenAI with structured outputs, return the parsed model."""
        rendered_prompt = self.prompt_manager.render_prompt(prompt_name, variables)

        model = self.model or rendered_prompt["parameters"].get("model", "gpt-4o-mini")
        temperature = rendered_prompt["parameters"].get("temperature", 0.1)
        max_tokens = rendered_prompt["parameters"].get("max_tokens", 2000)

        logger.info(
            f"Calling OpenAI ({prompt_name}) with model: {model}, "
            f"prompt version: {rendered_prompt['version']}"
        )

        try:
            response = self.client.beta.chat.completions.parse(
                model=model,
                messages=[
                    {"role": "system", "content": rendered_prompt["system_prompt"]},
                    {"role": "user", "content": rendered_prompt["user_prompt"]},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
                response_format=response_format,
            )
        except OpenAIError as e:
            logger.error(f"OpenAI API error: {e}")
            raise UpstreamUnavailable(f"OpenAI request failed: {e}") from e

        result = response.choices[0].message.parsed
        if result is None:
            logger.warning(f"OpenAI returned null parsed response for {prompt_name}")
            raise UpstreamUnavailable(f"OpenAI returned no usable {prompt_name} result")

        return result

    def _format_categories(self, categories: List[Category]) -> str:
        """Format categories for the prompt."""
        if not categories:
            return "No categories available."

        return "\n".join(f"- ID {cat.id}: {cat.name}" for cat in categories)
