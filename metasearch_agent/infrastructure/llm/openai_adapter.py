from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass
from importlib import import_module
from typing import Any, cast

from metasearch_agent.application.ports.llm_port import ChatMessage, LLMPort, LLMResponse
from metasearch_agent.domain.errors import LLMError


@dataclass
class OpenAIChatAdapter(LLMPort):
    """Any OpenAI-compatible chat endpoint (OpenAI, vLLM, Ollama, LM Studio...)."""

    base_url: str  # e.g. "http://localhost:8000/v1"
    api_key: str = "EMPTY"
    model: str = "meta-llama/Meta-Llama-3.1-8B-Instruct"
    timeout_s: float = 60.0

    def __post_init__(self) -> None:
        # Defer import of OpenAI to first use to avoid hard dependency in tests
        self._client: Any | None = None

    def _get_client(self) -> Any:
        if self._client is None:
            module = import_module("openai")
            self._client = module.AsyncOpenAI(
                base_url=self.base_url, api_key=self.api_key, timeout=self.timeout_s
            )
        return self._client

    def _request_args(
        self, messages: Sequence[ChatMessage], temperature: float, max_tokens: int | None
    ) -> dict[str, Any]:
        payload: Any = [{"role": m.role, "content": m.content} for m in messages]
        args: dict[str, Any] = {
            "model": self.model,
            "messages": cast(Any, payload),
            "temperature": temperature,
        }
        if max_tokens:
            args["max_tokens"] = max_tokens
        return args

    async def chat(
        self,
        messages: Sequence[ChatMessage],
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        try:
            client = self._get_client()
            resp: Any = await client.chat.completions.create(
                **self._request_args(messages, temperature, max_tokens)
            )
            choice = resp.choices[0]
            usage = getattr(resp, "usage", None)
            return LLMResponse(
                text=choice.message.content or "",
                finish_reason=choice.finish_reason or "stop",
                usage_tokens=getattr(usage, "total_tokens", None),
            )
        except Exception as ex:  # noqa: BLE001
            # Translate external errors to domain-specific errors
            raise LLMError(f"LLM communication failed: {ex}") from ex

    async def stream(
        self,
        messages: Sequence[ChatMessage],
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        try:
            client = self._get_client()
            chunks: Any = await client.chat.completions.create(
                stream=True, **self._request_args(messages, temperature, max_tokens)
            )
            async for chunk in chunks:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        except Exception as ex:  # noqa: BLE001
            raise LLMError(f"LLM streaming failed: {ex}") from ex
