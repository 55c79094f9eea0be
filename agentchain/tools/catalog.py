"""
Default tool catalog.

The declaration order below is significant: the registry lists tools in
this order and the keyword fallback scans it front to back.
"""

from __future__ import annotations

from .base import Tool, ToolKind

PUBLIC_TRANSFER_TOOL = "send_transaction"
CONFIDENTIAL_TRANSFER_TOOL = "confidential_execute"

#: Tools whose keywords are specific enough to be checked before the rest
SPECIFIC_TOOL_IDS = (
    "deploy_contract",
    "generate_token_contract",
    "encrypt_input",
    CONFIDENTIAL_TRANSFER_TOOL,
    "submit_agent_profile",
)


DEFAULT_TOOLS: tuple[Tool, ...] = (
    Tool(
        id="get_wallet_address",
        name="Get Wallet",
        description="Get connected wallet address",
        kind=ToolKind.READ,
        icon="🆔",
        keywords=("wallet address", "my address", "who am i"),
    ),
    Tool(
        id="get_balance",
        name="Check Balance",
        description="Check SHM/ETH balance",
        kind=ToolKind.READ,
        icon="💰",
        keywords=("balance", "how much", "funds", "shm", "money"),
        params={"address": "Address to check (defaults to the connected wallet)"},
    ),
    Tool(
        id="get_network",
        name="Check Network",
        description="Check chain",
        kind=ToolKind.READ,
        icon="🌐",
        keywords=("network", "chain", "which network", "connected to"),
    ),
    Tool(
        id="estimate_gas",
        name="Estimate Gas",
        description="Estimate tx cost",
        kind=ToolKind.READ,
        icon="⛽",
        keywords=("gas", "cost", "fee", "estimate gas"),
    ),
    Tool(
        id=PUBLIC_TRANSFER_TOOL,
        name="Send SHM",
        description="Send SHM/ETH publicly. Everything is visible on the explorer.",
        kind=ToolKind.WRITE,
        icon="💸",
        keywords=("send", "transfer", "pay", "give"),
        params={"to": "Recipient Address (0x...)", "amount": "Amount to send"},
    ),
    Tool(
        id="get_transaction_status",
        name="Tx Status",
        description="Check tx status",
        kind=ToolKind.READ,
        icon="🔍",
        keywords=("confirmed", "status", "track", "tx", "receipt"),
        params={"hash": "Transaction hash (0x...)"},
    ),
    Tool(
        id="generate_token_contract",
        name="Draft Token",
        description="Draft token contract",
        kind=ToolKind.WRITE,
        icon="📝",
        keywords=("draft", "template", "token code"),
    ),
    Tool(
        id="estimate_deploy_cost",
        name="Deploy Cost",
        description="Estimate deployment cost",
        kind=ToolKind.READ,
        icon="📊",
        keywords=("cost to deploy", "deployment price"),
    ),
    Tool(
        id="deploy_contract",
        name="Deploy Token",
        description="Deploy token to chain",
        kind=ToolKind.WRITE,
        icon="🚀",
        keywords=("deploy", "launch", "create token"),
    ),
    Tool(
        id="analyze_prompt",
        name="Analyze Intent",
        description="Understand prompt intent",
        kind=ToolKind.READ,
        icon="🧠",
        keywords=("if gas <", "explain intent", "analyze"),
    ),
    Tool(
        id="validate_constraints",
        name="Validate",
        description="Check limits/constraints",
        kind=ToolKind.READ,
        icon="⚖️",
        keywords=("if balance ok", "validate", "check limits"),
    ),
    Tool(
        id="generate_explanation",
        name="Explain Why",
        description="Explain decision logic",
        kind=ToolKind.READ,
        icon="💬",
        keywords=("why", "explain decision", "reasoning"),
    ),
    Tool(
        id="encrypt_input",
        name="Encrypt Input",
        description="Secure a value with Inco Lightning FHE",
        kind=ToolKind.PRIVATE,
        icon="🔒",
        keywords=("privately", "secretly", "hidden", "encrypt"),
        params={
            "value": "The number or value to encrypt",
            "type": "Type (uint8/16/32/64/128/256/bool)",
        },
    ),
    Tool(
        id=CONFIDENTIAL_TRANSFER_TOOL,
        name="Private Exec",
        description=(
            "Private execution via Inco. Use this for ANY request labeled private or secret."
        ),
        kind=ToolKind.PRIVATE,
        icon="🕵️",
        keywords=(
            "confidential",
            "privacy level",
            "private transaction",
            "secretly execute",
            "stealth",
        ),
        params={"to": "Recipient Address", "value": "Amount to send"},
    ),
    Tool(
        id="selective_disclosure",
        name="Disclosure",
        description="Reveal result only",
        kind=ToolKind.PRIVATE,
        icon="👁️",
        keywords=("hide inputs", "reveal only"),
    ),
    Tool(
        id="submit_agent_profile",
        name="Submit Profile",
        description="Add agent to DAO",
        kind=ToolKind.WRITE,
        icon="🗳️",
        keywords=("submit agent", "add to dao", "register agent"),
    ),
    Tool(
        id="list_approved_agents",
        name="List Agents",
        description="Show available agents",
        kind=ToolKind.READ,
        icon="📋",
        keywords=("show agents", "list available", "active agents"),
    ),
    Tool(
        id="get_token_price",
        name="Check Price",
        description="Get token price via Coinbase",
        kind=ToolKind.READ,
        icon="🏷️",
        keywords=("price", "how much is", "value of", "rate"),
        params={"symbol": "Ticker symbol (e.g., BTC, ETH, SHM)"},
    ),
    Tool(
        id="check_liquidity",
        name="Check Liquidity",
        description="Check pool liquidity",
        kind=ToolKind.READ,
        icon="💧",
        keywords=("liquidity", "depth", "pool size", "slippage"),
        params={"pool": "Pool pair (e.g., SHM-USDT)"},
    ),
)
