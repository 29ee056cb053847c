"""Builds the configured LLM provider, if any."""

from typing import Optional
from config import Config
from llm.providers.base import LLMProvider
from llm.providers.openai import OpenAIProvider
from logger import get_logger

logger = get_logger()


def _build_openai(config: Config) -> LLMProvider:
    if not config.llm_openai_api_key:
        raise ValueError("OpenAI provider selected but llm.openai.api_key not configured")
    logger.debug(f"Initializing OpenAI provider (model: {config.llm_openai_model or 'default'})")
    return OpenAIProvider(api_key=config.llm_openai_api_key, model=config.llm_openai_model)


_BUILDERS = {
    "openai": _build_openai,
}


def get_llm_provider(config: Config) -> Optional[LLMProvider]:
    """Create the provider behind document extraction and live exchange rates.

    Returns None when LLM features are disabled or no provider is named; the
    exchange-rate service then uses its fallback rate and extraction reports
    UpstreamUnavailable.

    Raises:
        ValueError: If the provider is unknown or its settings are incomplete.
    """
    if not config.llm_enabled:
        logger.debug("LLM features are disabled")
        return None

    if not config.llm_provider:
        logger.info("LLM features are enabled but no provider is configured")
        return None

    builder = _BUILDERS.get(config.llm_provider)
    if builder is None:
        raise ValueError(
            f"Unknown LLM provider: {config.llm_provider} "
            f"(available: {', '.join(sorted(_BUILDERS))})"
        )
    return builder(config)
