"""OpenAI LLM client adapter."""

import json
from typing import Any

from openai import AsyncOpenAI

from news_gateway.adapters.llm.base import AbstractLLMClient
from news_gateway.core.errors import UpstreamAppError

DEFAULT_SYSTEM_PROMPT = "Output JSON only. No extra text or markdown formatting."

_PASSTHROUGH_PARAMS = ("max_tokens", "top_p", "frequency_penalty", "presence_penalty", "seed")


class OpenAIClient(AbstractLLMClient):
    """Chat-completions client that always requests a JSON object reply."""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 45.0,
        *,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self.client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self.model = model

    async def generate_json(
        self,
        prompt: str,
        *,
        system: str | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system or DEFAULT_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": kwargs.pop("temperature", 0.3),
            "response_format": {"type": "json_object"},
        }
        for param in _PASSTHROUGH_PARAMS:
            if param in kwargs:
                request_params[param] = kwargs[param]

        try:
            response = await self.client.chat.completions.create(**request_params)
        except Exception as exc:
            raise UpstreamAppError(
                code="llm_request_failed",
                message="LLM provider request failed",
                details={"context": {"service": "llm", "error_type": type(exc).__name__}},
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise UpstreamAppError(code="llm_empty_response", message="LLM returned an empty response")

        try:
            parsed = json.loads(content.strip())
        except json.JSONDecodeError as exc:
            raise UpstreamAppError(
                code="llm_invalid_json",
                message="LLM returned invalid JSON",
            ) from exc

        if not isinstance(parsed, dict):
            raise UpstreamAppError(code="llm_invalid_json", message="LLM reply is not a JSON object")
        return parsed
