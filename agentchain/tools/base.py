"""
Tool Base Classes.

This module defines the static description of an invocable action:
- ToolKind: read-only query, value-moving write, privacy-preserving write
- Tool: immutable catalog entry (id, label, kind, params, keywords)

Design Principle:
    A Tool is data, not behaviour. The registry lists tools for the
    router prompt and the keyword fallback; the executor owns the
    handler mapped to each id. Tools do NOT know how they are executed.

Usage:
    tool = Tool(
        id="get_balance",
        name="Check Balance",
        description="Check SHM/ETH balance",
        kind=ToolKind.READ,
        keywords=("balance", "how much", "funds"),
    )

    tool.matches("what's my balance?")  # True
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ToolKind(str, Enum):
    """Classification of a tool's effect."""

    READ = "read"
    WRITE = "write"
    PRIVATE = "private"


#: Tool ids containing this marker are confidential and never use the public path
CONFIDENTIAL_MARKER = "confidential"


@dataclass(frozen=True, slots=True)
class Tool:
    """
    Catalog entry for an invocable action.

    Attributes:
        id: Unique key (snake_case), used by the LLM and the executor
        name: Human label for feeds and logs
        description: What the tool does (shown to the LLM)
        kind: read / write / private
        params: Parameter name -> description hints (may be empty)
        keywords: Lowercase phrases for the keyword fallback
        icon: Display glyph used by feeds
    """

    id: str
    name: str
    description: str
    kind: ToolKind = ToolKind.READ
    params: dict[str, str] = field(default_factory=dict)
    keywords: tuple[str, ...] = ()
    icon: str = ""

    @property
    def is_read_only(self) -> bool:
        return self.kind == ToolKind.READ

    @property
    def moves_value(self) -> bool:
        """True for tools that need a signer and explicit approval."""
        return self.kind in (ToolKind.WRITE, ToolKind.PRIVATE)

    @property
    def is_confidential(self) -> bool:
        return self.kind == ToolKind.PRIVATE or CONFIDENTIAL_MARKER in self.id

    def matches(self, text: str) -> bool:
        """Whether any keyword occurs in the (lowercased) text."""
        lowered = text.lower()
        return any(keyword in lowered for keyword in self.keywords)

    def to_llm_schema(self) -> dict[str, Any]:
        """
        Convert to the compact schema embedded in the router prompt.

        Tools without explicit params are described as context dependent.
        """
        return {
            "id": self.id,
            "description": self.description,
            "params": dict(self.params) if self.params else "context dependent",
        }

    def __repr__(self) -> str:
        return f"<Tool {self.id} ({self.kind.value})>"
