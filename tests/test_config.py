"""
Tests for settings and chain presets.
"""

import pytest
from pydantic import ValidationError

from agentchain.config import (
    SHARDEUM_EVM,
    SHARDEUM_SPHINX,
    AppSettings,
    get_chain_preset,
    get_settings,
)


class TestAppSettings:
    """Tests for AppSettings.from_env."""

    def test_defaults(self):
        settings = AppSettings.from_env({})

        assert settings.llm_backend == "ollama"
        assert settings.chain == "shardeum-evm"
        assert settings.signer_private_key is None
        assert settings.log_dir is None
        assert settings.local_fallback is True

    def test_reads_prefixed_variables(self):
        settings = AppSettings.from_env(
            {
                "AGENTCHAIN_LLM_BACKEND": "gemini",
                "AGENTCHAIN_GEMINI_API_KEY": "key-123",
                "AGENTCHAIN_LOG_LEVEL": "debug",
                "AGENTCHAIN_LOCAL_FALLBACK": "false",
                "AGENTCHAIN_LOG_MAX_ENTRIES": "50",
                "LLM_BACKEND": "gateway",
            }
        )

        assert settings.llm_backend == "gemini"
        assert settings.gemini_api_key.get_secret_value() == "key-123"
        assert settings.log_level == "DEBUG"
        assert settings.local_fallback is False
        assert settings.log_max_entries == 50

    def test_empty_values_keep_defaults(self):
        settings = AppSettings.from_env({"AGENTCHAIN_OLLAMA_URL": "  ", "AGENTCHAIN_RPC_URL": ""})

        assert settings.ollama_url == "http://127.0.0.1:11434"
        assert settings.rpc_url is None

    def test_secrets_are_masked(self):
        settings = AppSettings.from_env({"AGENTCHAIN_SIGNER_PRIVATE_KEY": "0xsecret"})

        assert "0xsecret" not in repr(settings)
        assert settings.signer_private_key.get_secret_value() == "0xsecret"

    def test_llm_timeout_floor(self):
        with pytest.raises(ValidationError):
            AppSettings.from_env({"AGENTCHAIN_LLM_TIMEOUT_SECONDS": "5"})

    def test_unknown_backend_rejected(self):
        with pytest.raises(ValidationError):
            AppSettings.from_env({"AGENTCHAIN_LLM_BACKEND": "openai"})

    def test_get_settings_is_cached(self, monkeypatch):
        monkeypatch.setenv("AGENTCHAIN_AGENT_NAME", "DeFy Agent")
        get_settings.cache_clear()
        try:
            assert get_settings().agent_name == "DeFy Agent"
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


class TestChainPresets:
    """Tests for get_chain_preset."""

    def test_lookup_is_case_insensitive(self):
        assert get_chain_preset(" Shardeum-EVM ") is SHARDEUM_EVM
        assert get_chain_preset("shardeum-sphinx") is SHARDEUM_SPHINX

    def test_unknown_chain(self):
        with pytest.raises(KeyError):
            get_chain_preset("ethereum")

    def test_tx_url(self):
        assert SHARDEUM_EVM.tx_url("0xabc") == "https://explorer-evm.shardeum.org/tx/0xabc"
        assert SHARDEUM_EVM.chain_id_hex == "0x1fb7"
