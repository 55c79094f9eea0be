"""
LLM Provider Protocol for AgentChain.

Defines the interface for the language-model collaborator that the
intent router consults. Backends differ in wire shape:

- Ollama chat:   {"message": {"content": "<json-or-text>"}}
- Agent gateway: "<text>" or {"response": "<json>"} or {"output": ...}
- Gemini SDK:    response.text

extract_completion_text() normalizes all of them by structure.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from agentchain.errors import RoutingError


class MessageRole(str, Enum):
    """Role of a message in the conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class Message:
    """A message in the LLM conversation."""

    role: MessageRole
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def system(cls, content: str) -> Message:
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> Message:
        return cls(role=MessageRole.ASSISTANT, content=content)


@dataclass
class LLMResponse:
    """
    Response from LLM completion.

    Attributes:
        content: The generated text content
        model: Model used for generation
        provider: Name of the provider
        raw: Decoded wire payload, kept for debugging
    """

    content: str
    model: str = ""
    provider: str = ""
    raw: Any = None


@dataclass
class LLMConfig:
    """
    Configuration for LLM requests.

    Attributes:
        model: Model identifier (provider default if None)
        temperature: Sampling temperature
        max_tokens: Maximum tokens to generate
        response_format: "json" to request JSON mode where supported
    """

    model: str | None = None
    temperature: float = 0.2
    max_tokens: int = 1024
    response_format: str | None = "json"
    options: dict[str, Any] = field(default_factory=dict)


class LLMProviderError(RoutingError):
    """An LLM backend failed to produce a completion."""

    reason = "llm_failed"


class LLMUnavailableError(LLMProviderError):
    """The LLM backend cannot be reached at all (not configured, refused)."""

    reason = "llm_unavailable"


@runtime_checkable
class LLMProvider(Protocol):
    """
    Protocol for LLM providers.

    Supported backends:
    - Ollama (llama3 via /api/chat)
    - Agent gateway (/run-agent)
    - Google Gemini
    """

    @property
    def name(self) -> str:
        ...

    async def complete(
        self,
        messages: list[Message],
        config: LLMConfig | None = None,
    ) -> LLMResponse:
        ...


class BaseLLMProvider(ABC):
    """Base class for LLM provider implementations."""

    def __init__(self, default_model: str = ""):
        self.default_model = default_model

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        config: LLMConfig | None = None,
    ) -> LLMResponse:
        pass

    async def close(self) -> None:
        """Release network resources (no-op by default)."""
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', model='{self.default_model}')"


def extract_completion_text(payload: Any) -> str:
    """
    Pull the generated text out of any supported response shape.

    Checks, in order: plain string, message.content, response, output,
    content, text. Anything else is returned as its JSON encoding so the
    router can still try to find a decision inside it.
    """
    if payload is None:
        return ""
    if isinstance(payload, str):
        return payload

    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, dict) and isinstance(message.get("content"), str):
            return message["content"]

        for key in ("response", "output", "content", "text"):
            value = payload.get(key)
            if isinstance(value, str):
                return value
            if isinstance(value, dict):
                return json.dumps(value)

    return json.dumps(payload, default=str)
