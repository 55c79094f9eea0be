"""
Configuration Schemas for AgentChain.

Security:
    Private keys and API keys use SecretStr to prevent accidental logging
    of credentials. Access the value with `.get_secret_value()`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator

from .chains import DECISION_LOGGER_ADDRESS

LLMBackend = Literal["ollama", "gateway", "gemini", "none"]

ENV_PREFIX = "AGENTCHAIN_"


class AppSettings(BaseModel):
    """
    Application settings model.

    Built from AGENTCHAIN_* environment variables by from_env().

    Security:
        Secrets use SecretStr. Access with: settings.signer_private_key.get_secret_value()
    """

    # Service identity
    service_name: str = "agentchain"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Language model
    llm_backend: LLMBackend = Field(default="ollama", description="Which LLM collaborator to use")
    ollama_url: str = Field(default="http://127.0.0.1:11434", description="Ollama base URL")
    ollama_model: str = "llama3"
    gateway_url: str = Field(default="", description="Agent gateway base URL (/run-agent)")
    gateway_api_key: SecretStr | None = None
    gemini_api_key: SecretStr = Field(default=SecretStr(""), description="Google Gemini API key")
    gemini_model: str = "gemini-2.5-flash"
    llm_timeout_seconds: float = Field(default=90.0, ge=30.0)
    local_fallback: bool = True

    # Chain
    chain: str = Field(default="shardeum-evm", description="Chain preset key")
    rpc_url: str | None = Field(default=None, description="Override the preset RPC URL")
    signer_private_key: SecretStr | None = None
    decision_logger_address: str = DECISION_LOGGER_ADDRESS

    # Oracles / confidential compute
    coinbase_url: str = "https://api.coinbase.com"
    dexscreener_url: str = "https://api.dexscreener.com"
    inco_url: str = Field(default="", description="Inco encryption bridge base URL")
    inco_api_key: SecretStr | None = None
    http_timeout_seconds: float = Field(default=30.0, gt=0)
    http_max_retries: int = Field(default=2, ge=0)

    # Decision log
    log_dir: str | None = Field(default=None, description="Directory for the persisted log")
    log_namespace: str = "defy_activity_logs"
    log_max_entries: int | None = Field(default=None, ge=1)

    # Session
    agent_name: str = "System"
    execution_timeout_seconds: float = Field(default=120.0, gt=0)

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppSettings:
        """
        Build settings from AGENTCHAIN_* variables.

        Unset or empty variables keep their defaults.
        """
        environ = os.environ if environ is None else environ
        values: dict[str, str] = {}
        for name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw.strip() != "":
                values[name] = raw.strip()
        return cls.model_validate(values)


__all__ = [
    "AppSettings",
    "ENV_PREFIX",
    "LLMBackend",
]
