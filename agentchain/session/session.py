"""
Agent Session (Two-Phase Turn Engine).

An AgentSession drives one user's conversation with the agent:
1. process_prompt(prompt) -> Decision      (routing, "THINKING" log entry)
2. execute(decision, approved=True)        (tool effect, execution log entry)

Nothing moves value between the two phases: write and private tools only
run once the caller approves the exact Decision the session produced last.

Invariants:
    - One routing call at a time (a second concurrent call is rejected)
    - Every turn owns its log entry; the entry always ends Success/Reverted
    - Abandoned turns are detected with a generation counter; their late
      results are dropped
    - Execution is bounded by a caller-side timeout

Usage:
    session = AgentSession(router, executor, DecisionLog())

    decision = await session.process_prompt("send 5 to 0x...")
    if decision.is_error:
        print(decision.error)
    else:
        print(decision.explanation)
        outcome = await session.execute(decision, approved=True)
        print(outcome.message)
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from agentchain.errors import AgentChainError, ApprovalRequiredError
from agentchain.executor import NOT_IMPLEMENTED, ExecuteOptions, display_amount
from agentchain.log import DecisionLogEntry, EntryStatus, EntryType, Phase, PhaseStatus
from agentchain.routing import Decision, RouteContext
from agentchain.tools import CONFIDENTIAL_MARKER

from .result import ExecutionOutcome, failure_outcome, success_outcome

if TYPE_CHECKING:
    from agentchain.executor import ToolExecutor
    from agentchain.log import DecisionLog
    from agentchain.routing import IntentRouter

logger = logging.getLogger(__name__)

DEFAULT_EXECUTION_TIMEOUT = 120.0
DEFAULT_NETWORK = "Shardeum EVM Testnet"

BUSY_MESSAGE = "Agent is busy processing another prompt"
ABANDONED_MESSAGE = "Turn abandoned"


def action_label(tool_id: str) -> str:
    """Log label for a tool: "send_transaction" -> "SEND TRANSACTION"."""
    return tool_id.replace("_", " ").upper()


class AgentSession:
    """
    Routes prompts and executes approved decisions, recording both in a
    DecisionLog.

    Example:
        session = AgentSession(router, executor, log, agent_name="DeFy Agent")

        decision = await session.process_prompt("what is the gas price?")
        outcome = await session.execute(decision)

        # Value-moving tools need explicit approval
        decision = await session.process_prompt("send 5 to 0x...")
        await session.execute(decision)                  # ApprovalRequiredError
        await session.execute(decision, approved=True)   # runs
    """

    def __init__(
        self,
        router: IntentRouter,
        executor: ToolExecutor,
        log: DecisionLog,
        *,
        agent_name: str = "System",
        network: str = DEFAULT_NETWORK,
        execution_timeout: float = DEFAULT_EXECUTION_TIMEOUT,
    ):
        """
        Args:
            router: IntentRouter producing Decisions
            executor: ToolExecutor performing tool effects
            log: DecisionLog receiving one entry per phase
            agent_name: Agent label on log entries
            network: Network name handed to the router as context
            execution_timeout: Upper bound for one tool execution (seconds)
        """
        self._router = router
        self._executor = executor
        self._log = log
        self._agent_name = agent_name
        self._network = network
        self._execution_timeout = execution_timeout

        self._generation = 0
        self._thinking = False
        self._executing = False
        self._active_entries: set[int] = set()
        self._last_error: str | None = None
        self._last_decision: Decision | None = None

    # =========================================================================
    # State
    # =========================================================================

    @property
    def is_thinking(self) -> bool:
        return self._thinking

    @property
    def is_executing(self) -> bool:
        return self._executing

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def last_decision(self) -> Decision | None:
        """The current plan: the last successful Decision not yet executed."""
        return self._last_decision

    @property
    def log(self) -> DecisionLog:
        return self._log

    # =========================================================================
    # Phase 1: routing
    # =========================================================================

    async def process_prompt(self, prompt: str) -> Decision:
        """
        Route a prompt to a Decision.

        Never raises. A concurrent call, an abandoned turn, and routing
        failures all come back as an error Decision.
        """
        if self._thinking:
            logger.warning("[agent_session] Prompt rejected: a turn is already thinking")
            return Decision.failure(BUSY_MESSAGE)

        self._generation += 1
        generation = self._generation
        self._thinking = True
        self._last_error = None
        self._last_decision = None

        started = time.monotonic()
        entry_id = self._log.append(
            DecisionLogEntry(
                agent=self._agent_name,
                action="THINKING",
                console_logs=(f'Initiating cognitive layer for: "{prompt}"',),
            )
        )
        self._active_entries.add(entry_id)

        try:
            wallet = await self._wallet_address()
            self._log.append_console(
                entry_id,
                f"Context: Wallet={wallet or 'not connected'}, Network={self._network}",
                "Requesting LLM inference...",
            )
            self._log.add_phase(entry_id, Phase("Context", _elapsed_ms(started)))

            decision = await self._router.route(
                prompt, RouteContext(wallet_address=wallet, network=self._network)
            )
        except asyncio.CancelledError:
            if generation == self._generation:
                self._finish(entry_id, EntryStatus.REVERTED, "Turn cancelled.")
                self._thinking = False
            raise
        except Exception as e:
            logger.error(f"[agent_session] Unexpected routing failure: {e}", exc_info=True)
            decision = Decision.failure(f"Routing failed: {e}")

        if generation != self._generation:
            logger.info(f"[agent_session] Dropping late result of abandoned turn {entry_id}")
            return Decision.failure(ABANDONED_MESSAGE)

        self._thinking = False
        self._log.add_phase(
            entry_id,
            Phase(
                "Inference",
                _elapsed_ms(started),
                PhaseStatus.FAILED if decision.is_error else PhaseStatus.DONE,
                detail=decision.source,
            ),
        )

        if decision.is_error:
            self._last_error = decision.error
            self._finish(entry_id, EntryStatus.REVERTED, f"Error: {decision.error}")
            logger.warning(f"[agent_session] Turn {entry_id} failed: {decision.error}")
            return decision

        lines = [f"Reasoning: {decision.thought}"]
        if decision.source == "raw":
            lines.append("Fallback: Raw response parsed.")
        elif decision.source == "keyword":
            lines.append("Fallback: Local keyword routing.")
        lines.append(f"Plan: Execute tool {decision.tool}" if decision.tool else "Plan: No tool")

        self._last_decision = decision
        self._finish(entry_id, EntryStatus.SUCCESS, *lines)
        logger.info(f"[agent_session] Turn {entry_id} routed to {decision.tool or 'no tool'}")
        return decision

    # =========================================================================
    # Phase 2: execution
    # =========================================================================

    async def execute(
        self,
        decision: Decision,
        *,
        approved: bool = False,
        simulate: bool = False,
    ) -> ExecutionOutcome:
        """
        Execute the tool a Decision selected.

        Typed executor errors become a failed ExecutionOutcome; the log
        entry ends Reverted.

        Raises:
            ApprovalRequiredError: A write/private tool was not approved, or
                the decision is not the session's current plan
        """
        tool_id = decision.tool
        if decision.is_error or tool_id is None:
            return failure_outcome(
                tool_id, "no_tool", decision.error or "Decision has no tool to execute"
            )

        tool = self._executor.registry.get(tool_id)
        if tool is not None and tool.moves_value:
            if not approved:
                raise ApprovalRequiredError(f"Approval required to execute {tool_id}")
            if decision is not self._last_decision:
                raise ApprovalRequiredError(
                    f"Approval required: {tool_id} is not the current plan"
                )

        if self._executing:
            return failure_outcome(tool_id, "busy", "Agent is busy executing another tool")

        self._executing = True
        started_at = datetime.now(timezone.utc)
        started = time.monotonic()

        entry_id = self._log.append(self._execution_entry(tool_id, decision.params))
        self._active_entries.add(entry_id)

        try:
            result = await asyncio.wait_for(
                self._executor.execute(
                    tool_id,
                    decision.params,
                    ExecuteOptions(simulate=simulate, reasoning=decision.thought),
                ),
                timeout=self._execution_timeout,
            )
        except asyncio.TimeoutError:
            return self._fail(
                entry_id, tool_id, "timeout",
                f"Execution timed out after {self._execution_timeout:g}s",
                simulate, started_at,
            )
        except AgentChainError as e:
            return self._fail(
                entry_id, tool_id, e.reason, e.message, simulate, started_at
            )
        except asyncio.CancelledError:
            if entry_id in self._active_entries:
                self._finish(entry_id, EntryStatus.REVERTED, "Execution cancelled.")
                self._executing = False
            raise
        except Exception as e:
            logger.error(f"[agent_session] Unexpected execution failure: {e}", exc_info=True)
            return self._fail(
                entry_id, tool_id, "execution_failed", str(e), simulate, started_at
            )

        if entry_id not in self._active_entries:
            logger.info(f"[agent_session] Dropping late result of abandoned execution {entry_id}")
            return failure_outcome(
                tool_id, "abandoned", ABANDONED_MESSAGE,
                entry_id=entry_id, simulated=simulate, started_at=started_at,
            )

        self._executing = False

        if result == NOT_IMPLEMENTED:
            self._finish(entry_id, EntryStatus.REVERTED, f"Output: {result}")
            return failure_outcome(
                tool_id, "tool_not_found", result,
                entry_id=entry_id, simulated=simulate, started_at=started_at,
            )

        self._log.add_phase(entry_id, Phase("Execute", _elapsed_ms(started)))
        self._finish(entry_id, EntryStatus.SUCCESS, "Execution Complete.", f"Output: {result}")

        # A live run consumes the plan; a simulation leaves it approvable
        if not simulate and decision is self._last_decision:
            self._last_decision = None

        return success_outcome(
            tool_id, result, entry_id=entry_id, simulated=simulate, started_at=started_at
        )

    # =========================================================================
    # Abandon
    # =========================================================================

    def abandon(self) -> None:
        """
        Discard the in-flight turn.

        Its log entries are marked Reverted now; whatever result arrives
        later is dropped.
        """
        if not self._active_entries:
            return

        self._generation += 1
        for entry_id in sorted(self._active_entries):
            self._finish(entry_id, EntryStatus.REVERTED, f"{ABANDONED_MESSAGE}.")
        self._thinking = False
        self._executing = False
        self._last_error = ABANDONED_MESSAGE
        logger.info("[agent_session] In-flight turn abandoned")

    # =========================================================================
    # Internals
    # =========================================================================

    async def _wallet_address(self) -> str | None:
        signer = self._executor.context.signer
        if signer is None:
            return None
        try:
            return await signer.get_address()
        except Exception as e:
            logger.warning(f"[agent_session] Could not read wallet address: {e}")
            return None

    def _execution_entry(self, tool_id: str, params: dict[str, Any]) -> DecisionLogEntry:
        tool = self._executor.registry.get(tool_id)
        confidential = (
            tool.is_confidential if tool is not None else CONFIDENTIAL_MARKER in tool_id
        )
        return DecisionLogEntry(
            agent=self._agent_name,
            action=action_label(tool_id),
            amount=display_amount(params.get("amount") or params.get("value")),
            type=EntryType.CONFIDENTIAL if confidential else EntryType.PUBLIC,
            console_logs=(f"Executing tool: {tool_id}", f"Params: {_format_params(params)}"),
        )

    def _fail(
        self,
        entry_id: int,
        tool_id: str,
        error: str,
        message: str,
        simulate: bool,
        started_at: datetime,
    ) -> ExecutionOutcome:
        # Abandoned executions keep the Reverted entry abandon() wrote
        if entry_id in self._active_entries:
            self._executing = False
            self._last_error = message
            self._finish(entry_id, EntryStatus.REVERTED, f"Error: {message}")
        logger.warning(f"[agent_session] {tool_id} failed ({error}): {message}")
        return failure_outcome(
            tool_id, error, message,
            entry_id=entry_id, simulated=simulate, started_at=started_at,
        )

    def _finish(self, entry_id: int, status: EntryStatus, *lines: str) -> None:
        self._active_entries.discard(entry_id)
        current = self._log.get(entry_id)
        if current is None:
            return
        self._log.update(
            entry_id,
            status=status,
            console_logs=current.console_logs + tuple(lines),
        )


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def _format_params(params: dict[str, Any]) -> str:
    return ", ".join(f"{key}={value}" for key, value in params.items()) or "{}"


__all__ = [
    "ABANDONED_MESSAGE",
    "BUSY_MESSAGE",
    "AgentSession",
    "action_label",
]
