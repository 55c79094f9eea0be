"""
Chain presets.

Shardeum networks the agent knows how to talk to. Selected by name via
AGENTCHAIN_CHAIN ("shardeum-evm" or "shardeum-sphinx").
"""

from __future__ import annotations

from dataclasses import dataclass

#: Deployed DecisionLogger contract (logConfidentialDecision(bytes) payable)
DECISION_LOGGER_ADDRESS = "0x168FDc3Ae19A5d5b03614578C58974FF30FCBe92"


@dataclass(frozen=True, slots=True)
class ChainPreset:
    """Static description of an EVM network."""

    key: str
    name: str
    chain_id: int
    rpc_url: str
    explorer_url: str
    native_symbol: str = "SHM"
    decimals: int = 18

    @property
    def chain_id_hex(self) -> str:
        return hex(self.chain_id)

    def tx_url(self, tx_hash: str) -> str:
        return f"{self.explorer_url.rstrip('/')}/tx/{tx_hash}"


SHARDEUM_EVM = ChainPreset(
    key="shardeum-evm",
    name="Shardeum EVM Testnet",
    chain_id=8119,
    rpc_url="https://lb.shardeum.org/",
    explorer_url="https://explorer-evm.shardeum.org/",
)

SHARDEUM_SPHINX = ChainPreset(
    key="shardeum-sphinx",
    name="Shardeum Sphinx 1.X",
    chain_id=8082,
    rpc_url="https://sphinx.shardeum.org/",
    explorer_url="https://explorer-sphinx.shardeum.org/",
)

CHAIN_PRESETS: dict[str, ChainPreset] = {
    preset.key: preset for preset in (SHARDEUM_EVM, SHARDEUM_SPHINX)
}


def get_chain_preset(key: str) -> ChainPreset:
    """
    Look up a preset by key.

    Raises:
        KeyError: If the key is unknown
    """
    try:
        return CHAIN_PRESETS[key.strip().lower()]
    except KeyError:
        raise KeyError(f"Unknown chain '{key}'. Available: {sorted(CHAIN_PRESETS)}") from None


__all__ = [
    "ChainPreset",
    "CHAIN_PRESETS",
    "DECISION_LOGGER_ADDRESS",
    "SHARDEUM_EVM",
    "SHARDEUM_SPHINX",
    "get_chain_preset",
]
