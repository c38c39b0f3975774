"""Factory for the LLM client used by the rewrite route."""

import logging

from news_gateway.adapters.llm.base import AbstractLLMClient
from news_gateway.adapters.llm.openai_client import OpenAIClient
from news_gateway.core.config import LLMSettings
from news_gateway.core.errors import ValidationAppError

logger = logging.getLogger(__name__)


def create_llm_client(llm: LLMSettings) -> AbstractLLMClient | None:
    """Instantiate the configured LLM client.

    Returns None when no API key is configured, which leaves the rewrite
    route unavailable rather than failing application startup.

    Raises:
        ValidationAppError: If the provider is not supported.
    """
    provider = llm.provider.lower()

    if provider != "openai":
        raise ValidationAppError(
            code="llm_unknown_provider",
            message=f"Unknown LLM provider: '{provider}'. Supported providers: openai",
        )

    if llm.api_key is None or not llm.api_key.get_secret_value():
        logger.info("llm.disabled", extra={"reason": "missing_api_key", "provider": provider})
        return None

    return OpenAIClient(
        api_key=llm.api_key.get_secret_value(),
        model=llm.model,
        base_url=llm.base_url,
        timeout_seconds=llm.timeout_seconds,
    )
