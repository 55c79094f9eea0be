"""
Error taxonomy for AgentChain.

Every failure a caller may need to tell apart has its own type:

- RoutingError: LLM unreachable or returned garbage (recovered by fallback)
- DispatchError: unknown tool id (fails closed, never fatal)
- PreconditionError: missing signer, recipient, amount or approval
  (raised before any external call)
- UpstreamError: oracle, chain or confidential-compute failure
- PersistenceError: local store write failure (logged, never surfaced)

Propagation:
    IntentRouter never raises past its boundary.
    ToolExecutor raises the typed errors below.
    AgentSession converts them into Reverted log entries.
    DecisionLog never raises.
"""

from __future__ import annotations


class AgentChainError(Exception):
    """Base exception for all AgentChain errors."""

    #: Short machine-friendly reason, stable across messages
    reason: str = "agent_error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message())

    @classmethod
    def default_message(cls) -> str:
        return cls.reason.replace("_", " ")

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else self.default_message()


# =============================================================================
# Routing / Dispatch
# =============================================================================


class RoutingError(AgentChainError):
    """LLM collaborator unreachable, timed out, or returned malformed output."""

    reason = "routing_failed"


class DispatchError(AgentChainError):
    """A tool id could not be resolved against the registry."""

    reason = "tool_not_found"

    def __init__(self, tool_id: str, message: str | None = None):
        self.tool_id = tool_id
        super().__init__(message or f"Tool '{tool_id}' is not registered")


# =============================================================================
# Preconditions
# =============================================================================


class PreconditionError(AgentChainError):
    """A requirement for executing a tool is not met."""

    reason = "precondition_failed"


class WalletNotConnectedError(PreconditionError):
    """No signing capability is available for a write/private tool."""

    reason = "wallet_not_connected"

    @classmethod
    def default_message(cls) -> str:
        return "Wallet not connected"


class RecipientNotFoundError(PreconditionError):
    """A value-moving tool has no resolvable destination address."""

    reason = "recipient_not_found"

    @classmethod
    def default_message(cls) -> str:
        return "Recipient not found. Please provide a 0x... address."


class MissingAmountError(PreconditionError):
    """A value-moving tool has no usable (non-zero) amount."""

    reason = "missing_amount"

    @classmethod
    def default_message(cls) -> str:
        return "Missing amount: provide a positive value to transfer"


class ApprovalRequiredError(PreconditionError):
    """A write/private tool was executed without explicit user approval."""

    reason = "approval_required"

    @classmethod
    def default_message(cls) -> str:
        return "Approval required before executing a value-moving tool"


# =============================================================================
# Upstream
# =============================================================================


class UpstreamError(AgentChainError):
    """An external collaborator (oracle, chain, confidential compute) failed."""

    reason = "upstream_error"

    def __init__(
        self,
        message: str | None = None,
        *,
        service: str = "",
        status_code: int | None = None,
    ):
        self.service = service
        self.status_code = status_code
        super().__init__(message)

    def __str__(self) -> str:
        base = self.message
        if self.service:
            base = f"[{self.service}] {base}"
        if self.status_code:
            base = f"{base} (status={self.status_code})"
        return base


class UpstreamUnavailableError(UpstreamError):
    """Oracle/RPC/LLM could not be reached or answered with a server error."""

    reason = "upstream_unavailable"

    @classmethod
    def default_message(cls) -> str:
        return "Upstream unavailable"


class EncryptionFailedError(UpstreamError):
    """The confidential-compute collaborator could not encrypt a value."""

    reason = "encryption_failed"

    @classmethod
    def default_message(cls) -> str:
        return "Encryption failed"


# =============================================================================
# Persistence
# =============================================================================


class PersistenceError(AgentChainError):
    """Writing the decision log to durable storage failed."""

    reason = "persistence_failed"


__all__ = [
    "AgentChainError",
    "RoutingError",
    "DispatchError",
    "PreconditionError",
    "WalletNotConnectedError",
    "RecipientNotFoundError",
    "MissingAmountError",
    "ApprovalRequiredError",
    "UpstreamError",
    "UpstreamUnavailableError",
    "EncryptionFailedError",
    "PersistenceError",
]
