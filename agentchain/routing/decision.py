"""
Routing Decision and LLM Outcome types.

Decision is the structured result of one routing turn. The raw LLM
reply is first classified into exactly one outcome:

- JsonOutcome: a JSON object matching the decision contract
- RawOutcome: text with no usable JSON (kept as the explanation)
- FailedOutcome: nothing usable at all (empty reply, collaborator error)

Design Principle:
    Call sites never probe reply fields ad hoc. They match on the
    outcome type and call to_decision().

Usage:
    outcome = parse_llm_decision(response.content)

    if isinstance(outcome, JsonOutcome):
        print(outcome.decision.tool)

    decision = outcome.to_decision()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from agentchain.utils.json_parser import parse_json_object

logger = logging.getLogger(__name__)

#: Thought used when the LLM replied with prose instead of JSON
RAW_REASONING_THOUGHT = "Raw reasoning captured"

DecisionSource = Literal["llm", "raw", "keyword", "error"]

_NULL_TOOL_NAMES = frozenset({"", "null", "none"})


# =============================================================================
# Decision (Pydantic Validation)
# =============================================================================


class Decision(BaseModel):
    """
    Validated routing decision.

    LLM replies are validated against this schema so a malformed reply
    cannot smuggle unexpected types into the executor.
    """

    thought: str = Field(default="", description="Reasoning behind the choice")
    tool: Optional[str] = Field(default=None, description="Selected tool id, or None")
    params: dict[str, Any] = Field(default_factory=dict, description="Tool parameters")
    explanation: str = Field(default="", description="User-facing explanation")
    private: bool = Field(default=False, description="Privacy-sensitive action")

    error: Optional[str] = None
    source: DecisionSource = "llm"

    @field_validator("tool", mode="before")
    @classmethod
    def _normalize_tool(cls, value: Any) -> Any:
        if value is None:
            return None
        text = str(value).strip()
        if text.lower() in _NULL_TOOL_NAMES:
            return None
        return text

    @field_validator("params", mode="before")
    @classmethod
    def _normalize_params(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("thought", "explanation", mode="before")
    @classmethod
    def _normalize_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def has_tool(self) -> bool:
        return self.tool is not None

    @classmethod
    def raw(cls, text: str) -> Decision:
        """Decision for a prose reply: no tool, the text as explanation."""
        return cls(thought=RAW_REASONING_THOUGHT, explanation=text, source="raw")

    @classmethod
    def failure(cls, message: str) -> Decision:
        """Error-shaped decision; never carries a tool."""
        return cls(explanation=message, error=message, source="error")


# =============================================================================
# LLM Outcomes (tagged union)
# =============================================================================


@dataclass(frozen=True, slots=True)
class JsonOutcome:
    decision: Decision
    kind: Literal["json"] = "json"

    def to_decision(self) -> Decision:
        return self.decision


@dataclass(frozen=True, slots=True)
class RawOutcome:
    text: str
    kind: Literal["raw"] = "raw"

    def to_decision(self) -> Decision:
        return Decision.raw(self.text)


@dataclass(frozen=True, slots=True)
class FailedOutcome:
    reason: str
    kind: Literal["failed"] = "failed"

    def to_decision(self) -> Decision:
        return Decision.failure(self.reason)


LLMOutcome = Union[JsonOutcome, RawOutcome, FailedOutcome]

_CONTRACT_FIELDS = ("thought", "tool", "params", "explanation")


def parse_llm_decision(content: str | None) -> LLMOutcome:
    """
    Classify a raw LLM reply.

    The first balanced JSON object is used, wherever it sits in the
    reply (code fences and surrounding prose are tolerated). Objects that
    share no field with the decision contract, or fail validation, are
    treated as prose.
    """
    if content is None or not content.strip():
        return FailedOutcome("Empty response from language model")

    data = parse_json_object(content)
    if data is None or not any(key in data for key in _CONTRACT_FIELDS):
        logger.warning("[decision_parser] No decision JSON in reply, keeping raw text")
        return RawOutcome(content.strip())

    try:
        decision = Decision.model_validate(
            {key: data[key] for key in _CONTRACT_FIELDS if key in data} | {"source": "llm"}
        )
    except ValidationError as e:
        logger.warning(f"[decision_parser] Decision validation failed: {e.error_count()} errors")
        logger.debug(f"[decision_parser] Validation errors: {e.errors()}")
        return RawOutcome(content.strip())

    return JsonOutcome(decision)


__all__ = [
    "Decision",
    "DecisionSource",
    "RAW_REASONING_THOUGHT",
    "JsonOutcome",
    "RawOutcome",
    "FailedOutcome",
    "LLMOutcome",
    "parse_llm_decision",
]
