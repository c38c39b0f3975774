"""LLM adapter layer used to rewrite scraped articles."""

from news_gateway.adapters.llm.base import AbstractLLMClient
from news_gateway.adapters.llm.factory import create_llm_client
from news_gateway.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractLLMClient",
    "OpenAIClient",
    "create_llm_client",
]
