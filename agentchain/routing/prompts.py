"""
Router prompt templates.

The system instruction embeds the full tool catalog plus the
public/private policy and the strict JSON reply contract. The user
message is prefixed with a context block (wallet, network).
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from agentchain.tools import CONFIDENTIAL_TRANSFER_TOOL, PUBLIC_TRANSFER_TOOL

if TYPE_CHECKING:
    from agentchain.tools import ToolRegistry

    from .router import RouteContext

#: Words that signal the user wants a privacy-preserving action
PRIVACY_KEYWORDS: tuple[str, ...] = (
    "private",
    "privately",
    "hidden",
    "secret",
    "secretly",
    "stealth",
    "confidential",
)

# Note: Double braces {{ }} are escaped for Python .format()
SYSTEM_PROMPT_TEMPLATE = """You are {agent_name}, an advanced AI trading assistant.
Your goal is to help the user interact with the {chain_name} blockchain.
You have access to tools via the Model Context Protocol (MCP).

IMPORTANT - PUBLIC VS PRIVATE:
- Standard "{public_tool}" is PUBLIC. Everything is visible on the explorer.
- "{private_tool}" is PRIVATE. Use this if the user says {privacy_words}.
- NEVER use "{public_tool}" if the user asks for a PRIVATE transaction.
- For "{private_tool}" the amount parameter is named "value".

CRITICAL: Return your response ONLY as a strict JSON object.
DO NOT include any conversational filler.
Return purely the JSON block:
{{
  "thought": "Your reasoning process here. Explicitly state if you are using a public or private tool.",
  "tool": "tool_id",
  "params": {{ ...tool parameters... }},
  "explanation": "Explanation for the user"
}}
If no tool is needed, set tool to null.
Available Tools:
{tools_json}
"""

CONTEXT_TEMPLATE = """Context:
- User's Wallet Address: {wallet_address}
- Current Network: {network}
"""


def build_system_prompt(
    registry: ToolRegistry,
    *,
    agent_name: str = "AgentChain",
    chain_name: str = "Shardeum",
) -> str:
    """Render the system instruction for the given catalog."""
    privacy_words = ", ".join(f'"{word}"' for word in PRIVACY_KEYWORDS)
    return SYSTEM_PROMPT_TEMPLATE.format(
        agent_name=agent_name,
        chain_name=chain_name,
        public_tool=PUBLIC_TRANSFER_TOOL,
        private_tool=CONFIDENTIAL_TRANSFER_TOOL,
        privacy_words=privacy_words,
        tools_json=json.dumps(registry.to_llm_schemas(), ensure_ascii=False),
    )


def build_user_message(prompt: str, context: RouteContext) -> str:
    """Prefix the prompt with the wallet/network context block."""
    header = CONTEXT_TEMPLATE.format(
        wallet_address=context.wallet_address or "unknown",
        network=context.network or "unknown",
    )
    return f"{header}\n{prompt}"
