"""
AgentChain Providers.

Swappable language-model backends. Which one a deployment uses is
configuration (AGENTCHAIN_LLM_BACKEND), not a separate code path.
"""

from .llm import (
    GatewayLLMProvider,
    GeminiLLMProvider,
    LLMProvider,
    OllamaLLMProvider,
)

__all__ = [
    "GatewayLLMProvider",
    "GeminiLLMProvider",
    "LLMProvider",
    "OllamaLLMProvider",
]
