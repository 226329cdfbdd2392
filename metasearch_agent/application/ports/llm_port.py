from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from metasearch_agent.domain.models import ChatMessage


@dataclass(frozen=True)
class LLMResponse:
    text: str
    finish_reason: str = "stop"
    usage_tokens: int | None = None


@runtime_checkable
class LLMPort(Protocol):
    async def chat(
        self,
        messages: Sequence[ChatMessage],
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> LLMResponse: ...

    async def generate(
        self, prompt: str, temperature: float = 0.0, max_tokens: int | None = None
    ) -> str:
        """Convenience method for single-shot text generation.

        Args:
            prompt: The prompt text
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate (None = backend default)

        Returns:
            Generated text string

        Note:
            Default implementation uses chat with a single user message.
        """
        msg = ChatMessage(role="user", content=prompt)
        response = await self.chat([msg], temperature=temperature, max_tokens=max_tokens)
        return response.text

    def stream(
        self,
        messages: Sequence[ChatMessage],
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        """Yield text fragments in generation order."""
        ...
