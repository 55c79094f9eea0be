"""
Tool Executor.

Performs the effect of a routed tool against chain, oracle and
confidential-compute collaborators.

Dispatch:
    tool id -> handler coroutine (see handlers.DEFAULT_HANDLERS).
    Unknown or unwired ids return the NOT_IMPLEMENTED sentinel; they
    never raise.

Failure taxonomy (all AgentChainError):
    WalletNotConnectedError, RecipientNotFoundError, MissingAmountError
        preconditions, raised before any external call
    UpstreamUnavailableError
        oracle/RPC failure (IntegrationError from a collaborator)
    EncryptionFailedError
        confidential-compute failure

Simulation:
    ExecuteOptions(simulate=True) never reaches the signer. Transfers
    return a projected cost; other value-moving tools return a preview.

Usage:
    executor = ToolExecutor(registry, ToolContext(chain=chain, prices=coinbase))

    result = await executor.execute("get_token_price", {"symbol": "ETH"})
    preview = await executor.execute(
        "send_transaction",
        {"to": "0x...", "amount": "5"},
        ExecuteOptions(simulate=True),
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from agentchain.errors import AgentChainError, UpstreamUnavailableError
from agentchain.integrations.base import IntegrationError

from .handlers import (
    DEFAULT_HANDLERS,
    LIVE_CONFIRM_NOTE,
    SIMULATED_TOOL_IDS,
    SIMULATION_MARKER,
    ExecuteOptions,
    ToolContext,
    ToolHandler,
)

if TYPE_CHECKING:
    from agentchain.integrations.chain import Signer
    from agentchain.tools import ToolRegistry

logger = logging.getLogger(__name__)

#: Result for tool ids with no registered handler
NOT_IMPLEMENTED = "Tool not implemented yet."


class ToolExecutor:
    """
    Executes catalog tools through registered handlers.

    Example:
        executor = ToolExecutor(create_default_registry(), ToolContext())
        assert executor.missing_handlers() == []
        await executor.execute("no_such_tool", {})  # -> NOT_IMPLEMENTED
    """

    def __init__(
        self,
        registry: ToolRegistry,
        context: ToolContext | None = None,
        handlers: dict[str, ToolHandler] | None = None,
    ):
        """
        Args:
            registry: Tool catalog (kind decides simulation behaviour)
            context: Collaborators passed to handlers
            handlers: Dispatch table (DEFAULT_HANDLERS when None)
        """
        self._registry = registry
        self._context = context or ToolContext()
        self._handlers: dict[str, ToolHandler] = dict(
            DEFAULT_HANDLERS if handlers is None else handlers
        )

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    @property
    def context(self) -> ToolContext:
        return self._context

    @property
    def has_signer(self) -> bool:
        return self._context.signer is not None

    def set_signer(self, signer: Signer | None) -> None:
        """Connect (or disconnect, with None) the wallet used by write tools."""
        self._context.signer = signer
        logger.info(f"[tool_executor] Signer {'connected' if signer else 'disconnected'}")

    def register_handler(self, tool_id: str, handler: ToolHandler) -> None:
        """Wire (or rewire) a handler for a tool id."""
        self._handlers[tool_id] = handler

    def missing_handlers(self) -> list[str]:
        """Catalog ids with no handler, in declaration order."""
        return [tool_id for tool_id in self._registry.list_ids() if tool_id not in self._handlers]

    async def execute(
        self,
        tool_id: str | None,
        params: dict[str, Any] | None = None,
        options: ExecuteOptions | None = None,
    ) -> str:
        """
        Execute one tool.

        Returns:
            Human-readable result (NOT_IMPLEMENTED for unknown ids)

        Raises:
            PreconditionError: Missing signer, recipient or amount
            UpstreamError: Collaborator failure (unavailable / encryption)
        """
        options = options or ExecuteOptions()
        params = dict(params or {})

        tool = self._registry.get(tool_id)
        handler = self._handlers.get(tool_id) if tool_id else None
        if tool is None or handler is None:
            logger.warning(f"[tool_executor] Tool execution not implemented for: {tool_id}")
            return NOT_IMPLEMENTED

        logger.info(
            f"[tool_executor] Executing tool: {tool_id} "
            f"[simulate={options.simulate}] params={sorted(params)}"
        )

        if options.simulate and tool.moves_value and tool_id not in SIMULATED_TOOL_IDS:
            return (
                f"{SIMULATION_MARKER}: {tool.name} validated. No changes were made.\n"
                f"{LIVE_CONFIRM_NOTE}"
            )

        try:
            result = await handler(self._context, params, options)
        except AgentChainError as e:
            logger.warning(f"[tool_executor] {tool_id} failed: {e}")
            raise
        except IntegrationError as e:
            logger.error(f"[tool_executor] {tool_id} upstream failure: {e}")
            raise UpstreamUnavailableError(
                f"Upstream unavailable: {e.args[0]}",
                service=e.integration,
                status_code=e.status_code,
            ) from e

        logger.info(f"[tool_executor] {tool_id} completed")
        return result


__all__ = [
    "NOT_IMPLEMENTED",
    "ToolExecutor",
]
