"""
AgentChain Configuration.

Settings come from AGENTCHAIN_* environment variables:

    AGENTCHAIN_LLM_BACKEND=ollama         # ollama | gateway | gemini | none
    AGENTCHAIN_OLLAMA_URL=http://127.0.0.1:11434
    AGENTCHAIN_CHAIN=shardeum-evm         # shardeum-evm | shardeum-sphinx
    AGENTCHAIN_SIGNER_PRIVATE_KEY=0x...   # optional; no key = read-only agent
    AGENTCHAIN_LOG_DIR=~/.agentchain      # optional; unset = in-memory log

Usage:
    settings = get_settings()
    preset = get_chain_preset(settings.chain)
"""

from __future__ import annotations

import logging
from functools import lru_cache

from .chains import (
    CHAIN_PRESETS,
    DECISION_LOGGER_ADDRESS,
    SHARDEUM_EVM,
    SHARDEUM_SPHINX,
    ChainPreset,
    get_chain_preset,
)
from .schemas import ENV_PREFIX, AppSettings, LLMBackend

logger = logging.getLogger(__name__)


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get application settings from the environment.

    Uses lru_cache for singleton pattern; call get_settings.cache_clear()
    after changing the environment (tests do).
    """
    settings = AppSettings.from_env()
    logger.debug(
        f"[config] Loaded settings: llm_backend={settings.llm_backend} chain={settings.chain}"
    )
    return settings


__all__ = [
    "AppSettings",
    "ChainPreset",
    "CHAIN_PRESETS",
    "DECISION_LOGGER_ADDRESS",
    "ENV_PREFIX",
    "LLMBackend",
    "SHARDEUM_EVM",
    "SHARDEUM_SPHINX",
    "get_chain_preset",
    "get_settings",
]
