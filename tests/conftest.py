"""
Pytest configuration and fixtures for AgentChain tests.
"""

import asyncio
import sys
from pathlib import Path

import pytest

# Add the repository root to path for imports
# This allows `from agentchain.routing import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from agentchain.executor import ToolContext, ToolExecutor  # noqa: E402
from agentchain.integrations import NetworkInfo, TransactionReceipt  # noqa: E402
from agentchain.log import DecisionLog, InMemoryLogStorage  # noqa: E402
from agentchain.providers.llm import LLMResponse, LLMUnavailableError  # noqa: E402
from agentchain.routing import IntentRouter  # noqa: E402
from agentchain.session import AgentSession  # noqa: E402
from agentchain.tools import create_default_registry  # noqa: E402

RECIPIENT = "0x742d35Cc6634C0532925a3b844Bc454e4438f44e"
WALLET = "0x1111111111111111111111111111111111111111"
TX_HASH = "0x" + "ab" * 32


# =============================================================================
# Fakes
# =============================================================================


class MockLLMProvider:
    """Mock LLM provider returning a canned reply (or raising)."""

    def __init__(self, response: str = "", *, error: Exception | None = None, delay: float = 0):
        self._response = response
        self._error = error
        self._delay = delay
        self.calls: list = []

    @property
    def name(self) -> str:
        return "mock_llm"

    async def complete(self, messages: list, config=None) -> LLMResponse:
        self.calls.append(messages)
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return LLMResponse(content=self._response, model="mock-model", provider=self.name)


class UnreachableLLMProvider(MockLLMProvider):
    """LLM provider whose server cannot be reached."""

    def __init__(self):
        super().__init__(error=LLMUnavailableError("Connection failed: refused"))


class FakeChain:
    """In-memory ChainReader."""

    def __init__(self, *, balance: int = 5 * 10**18, gas_price: int = 2 * 10**9):
        self.balance = balance
        self.gas_price = gas_price
        self.receipts: dict[str, TransactionReceipt] = {}
        self.calls: list[str] = []

    async def get_balance(self, address: str) -> int:
        self.calls.append(f"get_balance:{address}")
        return self.balance

    async def get_gas_price(self) -> int:
        self.calls.append("get_gas_price")
        return self.gas_price

    async def get_network(self) -> NetworkInfo:
        self.calls.append("get_network")
        return NetworkInfo(name="unknown", chain_id=8119)

    async def get_transaction_receipt(self, tx_hash: str) -> TransactionReceipt | None:
        self.calls.append(f"get_transaction_receipt:{tx_hash}")
        return self.receipts.get(tx_hash)


class FakeSigner:
    """Signer recording every state-mutating call."""

    def __init__(self, address: str = WALLET, tx_hash: str = TX_HASH):
        self.address = address
        self.tx_hash = tx_hash
        self.sent: list[tuple[str, int, bytes]] = []
        self.confidential: list[tuple[bytes, int]] = []

    async def get_address(self) -> str:
        return self.address

    async def send_transaction(self, to: str, value_wei: int, data: bytes = b"") -> str:
        self.sent.append((to, value_wei, data))
        return self.tx_hash

    async def log_confidential_decision(self, encrypted_thought: bytes, value_wei: int) -> str:
        self.confidential.append((encrypted_thought, value_wei))
        return self.tx_hash

    @property
    def mutations(self) -> int:
        return len(self.sent) + len(self.confidential)


class FakeConfidential:
    """ConfidentialCompute producing deterministic hex ciphertexts."""

    def __init__(self, *, error: Exception | None = None):
        self._error = error
        self.calls: list[dict] = []

    async def encrypt(self, value, *, account_address, dapp_address, handle_type) -> str:
        self.calls.append(
            {
                "value": value,
                "account_address": account_address,
                "dapp_address": dapp_address,
                "handle_type": handle_type,
            }
        )
        if self._error is not None:
            raise self._error
        return "0x" + format(len(self.calls), "02x") * 40


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def registry():
    return create_default_registry()


@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def signer():
    return FakeSigner()


@pytest.fixture
def confidential():
    return FakeConfidential()


@pytest.fixture
def tool_context(chain, confidential):
    """Context with chain and confidential compute but no wallet connected."""
    return ToolContext(chain=chain, confidential=confidential)


@pytest.fixture
def executor(registry, tool_context):
    return ToolExecutor(registry, tool_context)


@pytest.fixture
def decision_log():
    return DecisionLog(InMemoryLogStorage())


@pytest.fixture
def make_session(registry, executor, decision_log):
    """Factory for a session around a given LLM provider (None = keyword routing)."""

    def _make(llm=None, **kwargs) -> AgentSession:
        router = IntentRouter(llm, registry)
        return AgentSession(router, executor, decision_log, **kwargs)

    return _make
