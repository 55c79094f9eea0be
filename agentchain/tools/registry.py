"""
Tool Registry.

The registry is the authoritative catalog of invocable actions:
- Registration with validation
- Lookup by id
- Stable listing (declaration order) for the router prompt and fallback

Design Principle:
    Tools are registered once at startup and immutable during execution.
    The registry is shared by IntentRouter (prompt/context) and
    ToolExecutor (dispatch table).

Usage:
    registry = create_default_registry()

    tool = registry.get("get_balance")
    schemas = registry.to_llm_schemas()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from agentchain.errors import DispatchError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from .base import Tool

logger = logging.getLogger(__name__)


class ToolRegistryError(Exception):
    """Error in tool registry operations."""

    pass


class ToolRegistry:
    """
    Ordered registry of available tools.

    Example:
        registry = ToolRegistry()
        registry.register(Tool(id="get_balance", name="Check Balance", ...))

        for tool in registry.list():
            print(tool.id)
    """

    def __init__(self, tools: Iterable[Tool] | None = None) -> None:
        self._tools: dict[str, Tool] = {}
        for tool in tools or ():
            self.register(tool)

    def register(self, tool: Tool) -> None:
        """
        Register a tool.

        Args:
            tool: Tool to register

        Raises:
            ToolRegistryError: If the id is already registered or the tool is invalid
        """
        if tool.id in self._tools:
            raise ToolRegistryError(
                f"Tool '{tool.id}' already registered. Use a unique id or unregister first."
            )

        self._validate_tool(tool)

        self._tools[tool.id] = tool
        logger.debug(f"[tool_registry] Registered tool: {tool.id}")

    def unregister(self, tool_id: str) -> bool:
        """Unregister a tool by id. Returns False if it was not registered."""
        if tool_id in self._tools:
            del self._tools[tool_id]
            logger.info(f"[tool_registry] Unregistered tool: {tool_id}")
            return True
        return False

    def get(self, tool_id: str | None) -> Tool | None:
        """Get a tool by id, or None if not found."""
        if tool_id is None:
            return None
        return self._tools.get(tool_id)

    def get_required(self, tool_id: str) -> Tool:
        """
        Get a tool by id, raising if not found.

        Raises:
            DispatchError: If tool not found
        """
        tool = self._tools.get(tool_id)
        if tool is None:
            available = list(self._tools.keys())
            raise DispatchError(
                tool_id,
                f"Tool '{tool_id}' not found. Available tools: {available}",
            )
        return tool

    def list(self) -> list[Tool]:
        """List all tools in declaration order."""
        return list(self._tools.values())

    def list_ids(self) -> list[str]:
        """List all tool ids in declaration order."""
        return list(self._tools.keys())

    def to_llm_schemas(self) -> list[dict[str, Any]]:
        """Compact schemas (id, description, params) for the router prompt."""
        return [tool.to_llm_schema() for tool in self._tools.values()]

    def _validate_tool(self, tool: Tool) -> None:
        if not tool.id or not isinstance(tool.id, str):
            raise ToolRegistryError(f"Tool must have a valid id: {tool!r}")

        if not tool.description:
            raise ToolRegistryError(f"Tool '{tool.id}' must have a description")

        if any(keyword != keyword.lower() for keyword in tool.keywords):
            raise ToolRegistryError(f"Tool '{tool.id}' keywords must be lowercase")

    def __iter__(self) -> Iterator[Tool]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, tool_id: object) -> bool:
        return tool_id in self._tools

    def __repr__(self) -> str:
        return f"<ToolRegistry tools={list(self._tools.keys())}>"


# =============================================================================
# Factory Functions
# =============================================================================


def create_default_registry() -> ToolRegistry:
    """
    Create a registry holding the full default catalog.

    Returns:
        ToolRegistry with every tool from DEFAULT_TOOLS, in order
    """
    from .catalog import DEFAULT_TOOLS

    return ToolRegistry(DEFAULT_TOOLS)
