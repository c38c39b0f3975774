from abc import ABC, abstractmethod
from typing import Any


class AbstractLLMClient(ABC):
	"""Interface for LLM clients that produce structured JSON outputs."""

	@abstractmethod
	async def generate_json(
		self,
		prompt: str,
		*,
		system: str | None = None,
		**kwargs: Any,
	) -> dict[str, Any]:
		"""Generate a JSON object from the model.

		Args:
			prompt: User prompt to send to the model.
			system: Optional system instruction overriding the default.
			**kwargs: Provider-specific options (e.g., temperature, max_tokens).

		Returns:
			dict[str, Any]: Parsed JSON object returned by the model.

		Raises:
			UpstreamAppError: If the provider call fails or the reply is not a JSON object.
		"""
		...
