"""
AgentChain Intent Routing.

Maps a natural-language prompt to a Decision naming a catalog tool.

Usage:
    router = IntentRouter(llm=provider, registry=create_default_registry())
    decision = await router.route("check price of ETH", RouteContext())
"""

from .decision import (
    RAW_REASONING_THOUGHT,
    Decision,
    DecisionSource,
    FailedOutcome,
    JsonOutcome,
    LLMOutcome,
    RawOutcome,
    parse_llm_decision,
)
from .fallback import KeywordMatcher, signals_privacy, signals_transfer
from .prompts import PRIVACY_KEYWORDS, build_system_prompt, build_user_message
from .router import (
    DEFAULT_TIMEOUT_SECONDS,
    MIN_TIMEOUT_SECONDS,
    IntentRouter,
    RouteContext,
    apply_privacy_guard,
)

__all__ = [
    # Decision
    "Decision",
    "DecisionSource",
    "RAW_REASONING_THOUGHT",
    "JsonOutcome",
    "RawOutcome",
    "FailedOutcome",
    "LLMOutcome",
    "parse_llm_decision",
    # Router
    "IntentRouter",
    "RouteContext",
    "apply_privacy_guard",
    "DEFAULT_TIMEOUT_SECONDS",
    "MIN_TIMEOUT_SECONDS",
    # Fallback
    "KeywordMatcher",
    "signals_privacy",
    "signals_transfer",
    # Prompts
    "PRIVACY_KEYWORDS",
    "build_system_prompt",
    "build_user_message",
]
