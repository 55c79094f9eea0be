"""
AgentChain Session.

Two-phase turns: route a prompt to a Decision, then execute the approved
Decision. Both phases are recorded in the DecisionLog.
"""

from .result import ExecutionOutcome, failure_outcome, success_outcome
from .session import (
    ABANDONED_MESSAGE,
    BUSY_MESSAGE,
    DEFAULT_EXECUTION_TIMEOUT,
    AgentSession,
    action_label,
)

__all__ = [
    "AgentSession",
    "ExecutionOutcome",
    "success_outcome",
    "failure_outcome",
    "action_label",
    "ABANDONED_MESSAGE",
    "BUSY_MESSAGE",
    "DEFAULT_EXECUTION_TIMEOUT",
]
