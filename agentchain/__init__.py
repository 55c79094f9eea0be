"""
AgentChain - intent routing and execution for an on-chain AI agent.

AgentChain turns a natural-language prompt into a structured Decision
naming one tool from a fixed catalog, then executes the approved tool
against a Shardeum EVM chain:

- **Intent Routing**: LLM-backed routing with a tolerant JSON parser and a
  local keyword fallback when the model is unreachable
- **Privacy Guard**: prompts asking for privacy never yield a public transfer
- **Tool Execution**: chain reads, price and liquidity oracles, public and
  confidential (encrypted-intent) transfers, with a simulation mode
- **Decision Log**: subscribable, persisted record of every turn

Quick Start:
    >>> from agentchain import AgentRuntime, configure_logging, get_settings
    >>>
    >>> configure_logging()
    >>> async with AgentRuntime.from_settings(get_settings()) as runtime:
    ...     decision = await runtime.session.process_prompt("check price of ETH")
    ...     outcome = await runtime.session.execute(decision)
    ...     print(outcome.message)
"""

__version__ = "0.1.0"

from agentchain.config import AppSettings, get_settings
from agentchain.errors import AgentChainError
from agentchain.executor import ExecuteOptions, ToolExecutor
from agentchain.log import DecisionLog, DecisionLogEntry
from agentchain.routing import Decision, IntentRouter
from agentchain.runtime import AgentRuntime, configure_logging
from agentchain.session import AgentSession, ExecutionOutcome
from agentchain.tools import ToolRegistry, create_default_registry

__all__ = [
    # Version info
    "__version__",
    # Core
    "AgentRuntime",
    "AgentSession",
    "ExecutionOutcome",
    "IntentRouter",
    "Decision",
    "ToolExecutor",
    "ExecuteOptions",
    "DecisionLog",
    "DecisionLogEntry",
    "ToolRegistry",
    "create_default_registry",
    # Config
    "AppSettings",
    "get_settings",
    "configure_logging",
    # Errors
    "AgentChainError",
]
