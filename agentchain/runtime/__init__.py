"""
AgentChain Runtime.

Builds and owns the collaborators of a running agent.
"""

from .builder import LOG_FORMAT, AgentRuntime, configure_logging, create_llm_provider

__all__ = [
    "AgentRuntime",
    "LOG_FORMAT",
    "configure_logging",
    "create_llm_provider",
]
