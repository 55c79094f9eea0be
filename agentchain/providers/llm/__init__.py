"""
LLM Providers for AgentChain.

- OllamaLLMProvider: local llama3 via /api/chat
- GatewayLLMProvider: agent gateway via /run-agent
- GeminiLLMProvider: Google Gemini in JSON mode
"""

from .base import (
    BaseLLMProvider,
    LLMConfig,
    LLMProvider,
    LLMProviderError,
    LLMResponse,
    LLMUnavailableError,
    Message,
    MessageRole,
    extract_completion_text,
)
from .gemini import GeminiLLMProvider
from .ollama import GatewayLLMProvider, LLMHttpClient, OllamaLLMProvider

__all__ = [
    # Protocol and base
    "BaseLLMProvider",
    "LLMConfig",
    "LLMProvider",
    "LLMProviderError",
    "LLMResponse",
    "LLMUnavailableError",
    "Message",
    "MessageRole",
    "extract_completion_text",
    # Backends
    "GatewayLLMProvider",
    "GeminiLLMProvider",
    "LLMHttpClient",
    "OllamaLLMProvider",
]
