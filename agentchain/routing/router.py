"""
Intent Router.

Turns a free-text prompt into a Decision naming a tool.

Flow:
    prompt + context
        -> system instruction (catalog + policy + JSON contract)
        -> LLMProvider.complete (bounded by asyncio.wait_for)
        -> parse_llm_decision -> JsonOutcome | RawOutcome | FailedOutcome
        -> privacy guard
        -> Decision

Failure handling:
    - Collaborator unreachable (refused / not configured): KeywordMatcher
    - Timeout or any other collaborator failure: error Decision
    - Prose reply: raw Decision (no tool, text as explanation)

The router never raises past route(); every failure is a Decision.

Usage:
    router = IntentRouter(llm=OllamaLLMProvider(), registry=create_default_registry())

    decision = await router.route(
        "send 5 to 0xAbC...123",
        RouteContext(wallet_address="0x...", network="Shardeum EVM Testnet"),
    )
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from agentchain.errors import RoutingError
from agentchain.providers.llm import LLMConfig, LLMUnavailableError, Message
from agentchain.tools import CONFIDENTIAL_TRANSFER_TOOL, PUBLIC_TRANSFER_TOOL

from .decision import Decision, FailedOutcome, parse_llm_decision
from .fallback import KeywordMatcher, signals_privacy
from .prompts import build_system_prompt, build_user_message

if TYPE_CHECKING:
    from agentchain.providers.llm import LLMProvider
    from agentchain.tools import ToolRegistry

logger = logging.getLogger(__name__)

#: Local inference is slow; shorter timeouts are raised to this floor
MIN_TIMEOUT_SECONDS = 30.0
DEFAULT_TIMEOUT_SECONDS = 90.0


@dataclass(frozen=True, slots=True)
class RouteContext:
    """Ambient facts injected ahead of the prompt."""

    wallet_address: str | None = None
    network: str | None = None


def apply_privacy_guard(decision: Decision, prompt: str) -> Decision:
    """
    Never route a privacy-signalling prompt to the public transfer tool.

    send_transaction is replaced by confidential_execute and its "amount"
    parameter becomes "value". Any privacy signal sets Decision.private.
    """
    if not signals_privacy(prompt):
        return decision

    if decision.tool != PUBLIC_TRANSFER_TOOL:
        return decision.model_copy(update={"private": True})

    params = dict(decision.params)
    if "amount" in params and "value" not in params:
        params["value"] = params.pop("amount")

    logger.warning(
        f"[intent_router] Privacy requested; replacing {PUBLIC_TRANSFER_TOOL} "
        f"with {CONFIDENTIAL_TRANSFER_TOOL}"
    )
    return decision.model_copy(
        update={"tool": CONFIDENTIAL_TRANSFER_TOOL, "params": params, "private": True}
    )


class IntentRouter:
    """
    Routes prompts to tools via an LLM, with a local keyword fallback.

    Example:
        router = IntentRouter(llm=provider, registry=registry, timeout_seconds=60)
        decision = await router.route("what's my balance?", RouteContext())

        if decision.is_error:
            print(decision.error)
    """

    def __init__(
        self,
        llm: LLMProvider | None,
        registry: ToolRegistry,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        local_fallback: bool = True,
        llm_config: LLMConfig | None = None,
        agent_name: str = "AgentChain",
        chain_name: str = "Shardeum",
    ):
        """
        Args:
            llm: Language-model collaborator (None routes locally only)
            registry: Tool catalog embedded in the prompt
            timeout_seconds: Bound on the LLM call (at least 30s)
            local_fallback: Use keyword matching when the LLM is unreachable
            llm_config: Request settings (JSON mode, low temperature by default)
        """
        if timeout_seconds < MIN_TIMEOUT_SECONDS:
            logger.warning(
                f"[intent_router] Timeout {timeout_seconds}s below minimum, "
                f"using {MIN_TIMEOUT_SECONDS}s"
            )
            timeout_seconds = MIN_TIMEOUT_SECONDS

        self._llm = llm
        self._registry = registry
        self._timeout = timeout_seconds
        self._local_fallback = local_fallback
        self._llm_config = llm_config or LLMConfig()
        self._matcher = KeywordMatcher(registry)
        self._system_prompt = build_system_prompt(
            registry, agent_name=agent_name, chain_name=chain_name
        )

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    async def route(self, prompt: str, context: RouteContext | None = None) -> Decision:
        """
        Route one prompt. Never raises.

        Args:
            prompt: User's natural-language request
            context: Wallet/network facts for the prompt header

        Returns:
            Decision (possibly raw, keyword-matched, or error-shaped)
        """
        context = context or RouteContext()

        if not prompt or not prompt.strip():
            return Decision.failure("Prompt is empty")

        try:
            decision = await self._route_with_llm(prompt, context)
        except Exception as e:
            logger.error(f"[intent_router] Unexpected routing failure: {e}", exc_info=True)
            decision = Decision.failure(str(e) or type(e).__name__)

        return self._finalize(decision, prompt)

    async def _route_with_llm(self, prompt: str, context: RouteContext) -> Decision:
        if self._llm is None:
            return self._fallback(prompt, "No language model configured")

        messages = [
            Message.system(self._system_prompt),
            Message.user(build_user_message(prompt, context)),
        ]

        logger.info(f"[intent_router] Requesting decision from {self._llm.name}")
        try:
            response = await asyncio.wait_for(
                self._llm.complete(messages, self._llm_config),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"[intent_router] LLM timed out after {self._timeout}s")
            return FailedOutcome(
                f"Language model timed out after {self._timeout:.0f}s"
            ).to_decision()
        except LLMUnavailableError as e:
            return self._fallback(prompt, e.message)
        except RoutingError as e:
            logger.error(f"[intent_router] LLM backend failed ({e.reason}): {e.message}")
            return FailedOutcome(e.message).to_decision()
        except Exception as e:
            logger.error(f"[intent_router] LLM request failed: {e}")
            return FailedOutcome(str(e) or type(e).__name__).to_decision()

        outcome = parse_llm_decision(response.content)
        logger.info(f"[intent_router] LLM outcome: {outcome.kind}")
        return outcome.to_decision()

    def _fallback(self, prompt: str, reason: str) -> Decision:
        if not self._local_fallback:
            logger.warning(f"[intent_router] LLM unreachable, fallback disabled: {reason}")
            return Decision.failure(f"Language model unreachable: {reason}")

        logger.warning(f"[intent_router] LLM unreachable ({reason}), using keyword matching")
        return self._matcher.match(prompt)

    def _finalize(self, decision: Decision, prompt: str) -> Decision:
        decision = apply_privacy_guard(decision, prompt)

        if decision.tool is not None and decision.tool not in self._registry:
            logger.warning(f"[intent_router] LLM chose unknown tool: {decision.tool}")

        return decision


__all__ = [
    "IntentRouter",
    "RouteContext",
    "apply_privacy_guard",
    "MIN_TIMEOUT_SECONDS",
    "DEFAULT_TIMEOUT_SECONDS",
]
