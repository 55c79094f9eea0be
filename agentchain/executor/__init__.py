"""
AgentChain Tool Executor.

Performs routed tools: chain reads, oracle queries, public transfers and
confidential (encrypted-intent) transfers.
"""

from .amounts import (
    display_amount,
    format_gwei,
    format_units,
    sanitize_amount,
    require_base_units,
    to_base_units,
)
from .executor import NOT_IMPLEMENTED, ToolExecutor
from .handlers import (
    DEFAULT_HANDLERS,
    LIVE_CONFIRM_NOTE,
    SIMULATED_TOOL_IDS,
    SIMULATION_MARKER,
    ExecuteOptions,
    ToolContext,
    ToolHandler,
    canned,
)

__all__ = [
    # Executor
    "ToolExecutor",
    "ExecuteOptions",
    "ToolContext",
    "ToolHandler",
    "NOT_IMPLEMENTED",
    # Handlers
    "DEFAULT_HANDLERS",
    "SIMULATED_TOOL_IDS",
    "SIMULATION_MARKER",
    "LIVE_CONFIRM_NOTE",
    "canned",
    # Amounts
    "sanitize_amount",
    "require_base_units",
    "to_base_units",
    "format_units",
    "format_gwei",
    "display_amount",
]
