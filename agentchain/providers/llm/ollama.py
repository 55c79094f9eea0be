"""
HTTP LLM providers: Ollama and the agent gateway.

Both talk JSON over HTTP through IntegrationClient, so connection
failures surface as LLMUnavailableError and everything else as
LLMProviderError.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from agentchain.integrations.base import (
    IntegrationClient,
    IntegrationConfig,
    IntegrationError,
    ServiceUnreachableError,
)

from .base import (
    BaseLLMProvider,
    LLMConfig,
    LLMProviderError,
    LLMResponse,
    LLMUnavailableError,
    Message,
    MessageRole,
    extract_completion_text,
)

logger = logging.getLogger(__name__)


class LLMHttpClient(IntegrationClient):
    """IntegrationClient for one LLM backend; no retries (inference is slow)."""

    def __init__(
        self,
        name: str,
        config: IntegrationConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(config, transport=transport)
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def _get_auth_headers(self) -> dict[str, str]:
        if self.config.api_key:
            return {"Authorization": f"Bearer {self.config.api_key}"}
        return {}

    async def post_json(self, path: str, payload: dict[str, Any]) -> Any:
        try:
            response = await self._request("POST", path, json=payload)
        except ServiceUnreachableError as e:
            raise LLMUnavailableError(str(e)) from e
        except IntegrationError as e:
            raise LLMProviderError(str(e)) from e

        try:
            return response.json()
        except ValueError:
            return response.text

    async def is_reachable(self, path: str) -> bool:
        """GET a cheap endpoint; any HTTP answer below 400 counts as up."""
        try:
            await self._request("GET", path)
        except IntegrationError as e:
            logger.debug(f"[{self.name}] Health probe {path} failed: {e}")
            return False
        return True


class OllamaLLMProvider(BaseLLMProvider):
    """
    Local Ollama chat backend.

    POST /api/chat with {"model", "messages", "stream": false}.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:11434",
        model: str = "llama3",
        *,
        timeout: float = 90.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(default_model=model)
        self._http = LLMHttpClient(
            "ollama",
            IntegrationConfig(base_url=base_url, timeout=timeout, max_retries=0),
            transport=transport,
        )

    @property
    def name(self) -> str:
        return "ollama"

    async def complete(
        self,
        messages: list[Message],
        config: LLMConfig | None = None,
    ) -> LLMResponse:
        if config is None:
            config = LLMConfig()

        model = config.model or self.default_model
        payload: dict[str, Any] = {
            "model": model,
            "messages": [msg.to_dict() for msg in messages],
            "stream": False,
            "options": {"temperature": config.temperature, **config.options},
        }
        if config.response_format == "json":
            payload["format"] = "json"

        logger.debug(f"[ollama] Fetching /api/chat model={model}")
        data = await self._http.post_json("/api/chat", payload)

        return LLMResponse(
            content=extract_completion_text(data),
            model=model,
            provider=self.name,
            raw=data,
        )

    async def health_check(self) -> bool:
        """Whether the Ollama server answers GET /api/tags."""
        return await self._http.is_reachable("/api/tags")

    async def close(self) -> None:
        await self._http.close()


class GatewayLLMProvider(BaseLLMProvider):
    """
    Agent gateway backend.

    POST /run-agent with {"prompt": "<system>\\n\\nUser: <prompt>"}. The
    gateway has no system role, so messages are flattened into one prompt.
    """

    def __init__(
        self,
        base_url: str,
        *,
        path: str = "/run-agent",
        timeout: float = 90.0,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(default_model="gateway")
        self._path = path
        self._http = LLMHttpClient(
            "gateway",
            IntegrationConfig(base_url=base_url, timeout=timeout, api_key=api_key, max_retries=0),
            transport=transport,
        )

    @property
    def name(self) -> str:
        return "gateway"

    @staticmethod
    def _flatten(messages: list[Message]) -> str:
        system = "\n\n".join(m.content for m in messages if m.role == MessageRole.SYSTEM)
        turns = [
            f"{'User' if m.role == MessageRole.USER else 'Assistant'}: {m.content}"
            for m in messages
            if m.role != MessageRole.SYSTEM
        ]
        return "\n\n".join(part for part in (system, "\n".join(turns)) if part)

    async def complete(
        self,
        messages: list[Message],
        config: LLMConfig | None = None,
    ) -> LLMResponse:
        data = await self._http.post_json(self._path, {"prompt": self._flatten(messages)})

        return LLMResponse(
            content=extract_completion_text(data),
            model=self.default_model,
            provider=self.name,
            raw=data,
        )

    async def close(self) -> None:
        await self._http.close()
