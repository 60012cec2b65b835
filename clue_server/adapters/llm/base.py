from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Mapping


class AbstractLLMClient(ABC):
	"""Interface for completion providers used by the generation service."""

	model: str

	@abstractmethod
	async def complete(
		self,
		messages: Sequence[Mapping[str, Any]],
		*,
		temperature: float,
		json_mode: bool = False,
		max_tokens: int | None = None,
	) -> str:
		"""Run one chat completion and return the reply text.

		Args:
			messages: Ordered role-tagged messages ({"role": ..., "content": ...}).
			temperature: Sampling temperature.
			json_mode: Constrain the output to a single JSON object.
			max_tokens: Optional cap on the size of the reply.

		Returns:
			str: Reply text; empty when the provider returned no content.

		Raises:
			ProviderCallError: If the provider call fails.
		"""
		...
