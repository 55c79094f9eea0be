"""
AgentChain Tools.

Tools are the static catalog of actions an agent can take: read-only
queries, value-moving writes and privacy-preserving writes.

Usage:
    registry = create_default_registry()

    for tool in registry.list():
        print(tool.id, tool.kind.value)
"""

from .base import CONFIDENTIAL_MARKER, Tool, ToolKind
from .catalog import (
    CONFIDENTIAL_TRANSFER_TOOL,
    DEFAULT_TOOLS,
    PUBLIC_TRANSFER_TOOL,
    SPECIFIC_TOOL_IDS,
)
from .registry import ToolRegistry, ToolRegistryError, create_default_registry

__all__ = [
    "Tool",
    "ToolKind",
    "CONFIDENTIAL_MARKER",
    "ToolRegistry",
    "ToolRegistryError",
    "create_default_registry",
    "DEFAULT_TOOLS",
    "PUBLIC_TRANSFER_TOOL",
    "CONFIDENTIAL_TRANSFER_TOOL",
    "SPECIFIC_TOOL_IDS",
]
