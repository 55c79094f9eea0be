"""
Runtime Builder.

Constructs a live AgentRuntime (providers, oracles, chain, log, executor,
router, session) from AppSettings.

Usage:
    configure_logging(settings.log_level)

    async with AgentRuntime.from_settings(get_settings()) as runtime:
        decision = await runtime.session.process_prompt("check price of ETH")
        outcome = await runtime.session.execute(decision)

    # Tests inject collaborators instead of building them from settings
    runtime = AgentRuntime.from_settings(settings, llm=MockLLM(), transport=mock_transport)
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

import httpx

from agentchain.config import AppSettings, get_chain_preset, get_settings
from agentchain.executor import ToolContext, ToolExecutor
from agentchain.integrations import (
    CoinbasePriceClient,
    DexScreenerClient,
    IncoGatewayClient,
    IntegrationConfig,
    Web3ChainClient,
    Web3Signer,
)
from agentchain.log import DecisionLog, InMemoryLogStorage, JsonFileLogStorage
from agentchain.providers.llm import (
    GatewayLLMProvider,
    GeminiLLMProvider,
    OllamaLLMProvider,
)
from agentchain.routing import IntentRouter
from agentchain.session import AgentSession
from agentchain.tools import create_default_registry

if TYPE_CHECKING:
    from agentchain.integrations import ChainReader, Signer
    from agentchain.providers.llm import LLMProvider
    from agentchain.tools import ToolRegistry

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging the same way for every entry point."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def create_llm_provider(
    settings: AppSettings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> LLMProvider | None:
    """
    Build the configured LLM collaborator.

    Returns:
        The provider, or None for llm_backend="none" (local routing only)
    """
    backend = settings.llm_backend

    if backend == "ollama":
        return OllamaLLMProvider(
            settings.ollama_url,
            settings.ollama_model,
            timeout=settings.llm_timeout_seconds,
            transport=transport,
        )

    if backend == "gateway":
        if not settings.gateway_url:
            logger.warning("[runtime_builder] Gateway backend selected without gateway_url")
            return None
        return GatewayLLMProvider(
            settings.gateway_url,
            timeout=settings.llm_timeout_seconds,
            api_key=(
                settings.gateway_api_key.get_secret_value() if settings.gateway_api_key else None
            ),
            transport=transport,
        )

    if backend == "gemini":
        return GeminiLLMProvider(
            settings.gemini_api_key.get_secret_value(),
            model=settings.gemini_model,
        )

    return None


class AgentRuntime:
    """
    Owns every long-lived collaborator of one agent.

    Example:
        runtime = AgentRuntime.from_settings(settings)
        try:
            await runtime.session.process_prompt("what network am I on?")
        finally:
            await runtime.close()
    """

    def __init__(
        self,
        *,
        settings: AppSettings,
        registry: ToolRegistry,
        llm: LLMProvider | None,
        router: IntentRouter,
        executor: ToolExecutor,
        log: DecisionLog,
        session: AgentSession,
        chain: ChainReader | None = None,
        http_clients: list | None = None,
    ):
        self.settings = settings
        self.registry = registry
        self.llm = llm
        self.router = router
        self.executor = executor
        self.log = log
        self.session = session
        self.chain = chain
        self._http_clients = list(http_clients or [])
        self._closed = False

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings | None = None,
        *,
        llm: LLMProvider | None = None,
        chain: ChainReader | None = None,
        signer: Signer | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> AgentRuntime:
        """
        Build a runtime from settings.

        Args:
            settings: Application settings (get_settings() when None)
            llm: Override the configured LLM provider
            chain: Override the web3 chain client
            signer: Override the key-based signer
            transport: httpx transport for every HTTP client (tests)

        Raises:
            KeyError: Unknown chain preset
        """
        settings = settings or get_settings()
        preset = get_chain_preset(settings.chain)
        registry = create_default_registry()

        if llm is None:
            llm = create_llm_provider(settings, transport=transport)

        http = IntegrationConfig(
            timeout=settings.http_timeout_seconds,
            max_retries=settings.http_max_retries,
        )
        prices = CoinbasePriceClient(
            replace(http, base_url=settings.coinbase_url), transport=transport
        )
        liquidity = DexScreenerClient(
            replace(http, base_url=settings.dexscreener_url), transport=transport
        )
        http_clients: list = [prices, liquidity]

        confidential = None
        if settings.inco_url:
            confidential = IncoGatewayClient(
                IntegrationConfig(
                    base_url=settings.inco_url,
                    timeout=settings.http_timeout_seconds,
                    api_key=(
                        settings.inco_api_key.get_secret_value() if settings.inco_api_key else None
                    ),
                    max_retries=settings.http_max_retries,
                ),
                transport=transport,
            )
            http_clients.append(confidential)
        else:
            logger.info("[runtime_builder] No inco_url configured, private transfers disabled")

        if chain is None:
            chain = Web3ChainClient(
                settings.rpc_url or preset.rpc_url,
                network_name=preset.name,
                request_timeout=settings.http_timeout_seconds,
            )

        if signer is None and settings.signer_private_key is not None:
            if isinstance(chain, Web3ChainClient):
                signer = Web3Signer(
                    chain,
                    settings.signer_private_key.get_secret_value(),
                    logger_address=settings.decision_logger_address,
                )
            else:
                logger.warning("[runtime_builder] Private key ignored: chain is not web3-backed")

        executor = ToolExecutor(
            registry,
            ToolContext(
                chain=chain,
                signer=signer,
                prices=prices,
                liquidity=liquidity,
                confidential=confidential,
                preset=preset,
                logger_address=settings.decision_logger_address,
            ),
        )

        if settings.log_dir:
            storage = JsonFileLogStorage(Path(settings.log_dir).expanduser(), settings.log_namespace)
        else:
            storage = InMemoryLogStorage()
        log = DecisionLog(storage, max_entries=settings.log_max_entries)

        router = IntentRouter(
            llm,
            registry,
            timeout_seconds=settings.llm_timeout_seconds,
            local_fallback=settings.local_fallback,
            agent_name=settings.agent_name,
            chain_name=preset.name,
        )
        session = AgentSession(
            router,
            executor,
            log,
            agent_name=settings.agent_name,
            network=preset.name,
            execution_timeout=settings.execution_timeout_seconds,
        )

        logger.info(
            f"[runtime_builder] Runtime built | llm={llm.name if llm else 'none'} | "
            f"chain={preset.key} | signer={'yes' if signer else 'no'} | "
            f"log={'file' if settings.log_dir else 'memory'}"
        )

        return cls(
            settings=settings,
            registry=registry,
            llm=llm,
            router=router,
            executor=executor,
            log=log,
            session=session,
            chain=chain,
            http_clients=http_clients,
        )

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        """
        Close HTTP clients, the chain provider and the log. Idempotent.

        A failing step is logged and the remaining steps still run.
        """
        if self._closed:
            return
        self._closed = True

        self.session.abandon()

        closers = [(f"http client {type(c).__name__}", c.close) for c in self._http_clients]
        for name, owner in (("llm", self.llm), ("chain", self.chain)):
            close_owner = getattr(owner, "close", None)
            if close_owner is not None:
                closers.append((name, close_owner))

        for name, closer in closers:
            try:
                await closer()
            except Exception as e:
                logger.error(f"[runtime_builder] Failed to close {name}: {e}")

        self.log.close()
        logger.info("[runtime_builder] Runtime closed")

    async def __aenter__(self) -> AgentRuntime:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


__all__ = [
    "AgentRuntime",
    "LOG_FORMAT",
    "configure_logging",
    "create_llm_provider",
]
