"""
Execution Outcome.

What AgentSession.execute returns. Typed executor errors are converted
into a failed outcome, so the caller always gets a value it can render.

Usage:
    outcome = await session.execute(decision, approved=True)

    if outcome.success:
        print(outcome.message)
    else:
        print(f"[{outcome.error}] {outcome.message}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class ExecutionOutcome:
    """
    Result of executing one routed tool.

    Attributes:
        success: Whether the tool completed
        tool_id: Tool that was executed (None if the decision had none)
        message: Tool output, or the user-facing failure message
        error: Stable failure reason ("wallet_not_connected", "timeout", ...)
        entry_id: DecisionLog entry recording the execution
        simulated: Whether this was a simulation
    """

    success: bool
    tool_id: str | None = None
    message: str = ""
    error: str = ""
    entry_id: int | None = None
    simulated: bool = False

    started_at: datetime = field(default_factory=_utc_now)
    completed_at: datetime = field(default_factory=_utc_now)

    @property
    def duration_ms(self) -> float:
        return (self.completed_at - self.started_at).total_seconds() * 1000

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "tool_id": self.tool_id,
            "message": self.message,
            "error": self.error,
            "entry_id": self.entry_id,
            "simulated": self.simulated,
            "duration_ms": self.duration_ms,
        }


# =============================================================================
# Factory Functions
# =============================================================================


def success_outcome(
    tool_id: str,
    message: str,
    *,
    entry_id: int | None = None,
    simulated: bool = False,
    started_at: datetime | None = None,
) -> ExecutionOutcome:
    return ExecutionOutcome(
        success=True,
        tool_id=tool_id,
        message=message,
        entry_id=entry_id,
        simulated=simulated,
        started_at=started_at or _utc_now(),
    )


def failure_outcome(
    tool_id: str | None,
    error: str,
    message: str,
    *,
    entry_id: int | None = None,
    simulated: bool = False,
    started_at: datetime | None = None,
) -> ExecutionOutcome:
    return ExecutionOutcome(
        success=False,
        tool_id=tool_id,
        message=message,
        error=error,
        entry_id=entry_id,
        simulated=simulated,
        started_at=started_at or _utc_now(),
    )


__all__ = [
    "ExecutionOutcome",
    "success_outcome",
    "failure_outcome",
]
