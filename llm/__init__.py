"""LLM integration for document extraction and exchange rates."""

from llm.factory import get_llm_provider

__all__ = ["get_llm_provider"]
