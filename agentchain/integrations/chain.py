"""
Chain RPC and signer collaborators.

ChainReader covers the read-only RPC surface (balance, fee, network,
receipt). Signer adds the two state-mutating calls the agent needs: a
native transfer and the payable confidential decision log.

Web3ChainClient / Web3Signer implement them with web3.py. Tests and
simulations pass lightweight fakes that satisfy the same protocols.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from .base import IntegrationError

logger = logging.getLogger(__name__)

#: Gas used by a plain native transfer
TRANSFER_GAS = 21000

DECISION_LOGGER_ABI: list[dict[str, Any]] = [
    {
        "inputs": [{"internalType": "bytes", "name": "encryptedThought", "type": "bytes"}],
        "name": "logConfidentialDecision",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function",
    }
]


@dataclass(frozen=True, slots=True)
class NetworkInfo:
    name: str
    chain_id: int


@dataclass(frozen=True, slots=True)
class TransactionReceipt:
    tx_hash: str
    status: int
    block_number: int

    @property
    def succeeded(self) -> bool:
        return self.status == 1


@runtime_checkable
class ChainReader(Protocol):
    """Read-only chain RPC."""

    async def get_balance(self, address: str) -> int:
        """Balance in wei."""
        ...

    async def get_gas_price(self) -> int:
        """Current gas price in wei."""
        ...

    async def get_network(self) -> NetworkInfo:
        ...

    async def get_transaction_receipt(self, tx_hash: str) -> TransactionReceipt | None:
        """Receipt, or None while pending/unknown."""
        ...


@runtime_checkable
class Signer(Protocol):
    """Signing capability of a connected wallet."""

    async def get_address(self) -> str:
        ...

    async def send_transaction(self, to: str, value_wei: int, data: bytes = b"") -> str:
        """Send native value (with optional calldata); returns the transaction hash."""
        ...

    async def log_confidential_decision(self, encrypted_thought: bytes, value_wei: int) -> str:
        """Record an encrypted payload and move value in one call; returns the hash."""
        ...


@asynccontextmanager
async def _rpc_errors(integration: str, action: str) -> AsyncIterator[None]:
    """Translate web3 / transport failures into IntegrationError."""
    try:
        yield
    except IntegrationError:
        raise
    except Exception as e:
        logger.error(f"[{integration}] {action} failed: {e}")
        raise IntegrationError(f"{action} failed: {e}", integration, retryable=False) from e


class Web3ChainClient:
    """
    ChainReader backed by web3.py's AsyncWeb3.

    Example:
        chain = Web3ChainClient("https://lb.shardeum.org/", network_name="Shardeum EVM Testnet")
        balance = await chain.get_balance("0x...")
    """

    def __init__(self, rpc_url: str, *, network_name: str = "", request_timeout: float = 30.0):
        from web3 import AsyncWeb3

        self._rpc_url = rpc_url
        self._network_name = network_name
        self.w3 = AsyncWeb3(
            AsyncWeb3.AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": request_timeout})
        )

    async def get_balance(self, address: str) -> int:
        async with _rpc_errors("chain", "Balance query"):
            checksum = self.w3.to_checksum_address(address)
            return int(await self.w3.eth.get_balance(checksum))

    async def get_gas_price(self) -> int:
        async with _rpc_errors("chain", "Gas price query"):
            return int(await self.w3.eth.gas_price)

    async def get_network(self) -> NetworkInfo:
        async with _rpc_errors("chain", "Network query"):
            chain_id = int(await self.w3.eth.chain_id)
        return NetworkInfo(name=self._network_name or "unknown", chain_id=chain_id)

    async def get_transaction_receipt(self, tx_hash: str) -> TransactionReceipt | None:
        from web3.exceptions import TransactionNotFound

        async with _rpc_errors("chain", "Receipt lookup"):
            try:
                receipt = await self.w3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                return None

        return TransactionReceipt(
            tx_hash=tx_hash,
            status=int(receipt["status"]),
            block_number=int(receipt["blockNumber"]),
        )

    async def close(self) -> None:
        provider = self.w3.provider
        disconnect = getattr(provider, "disconnect", None)
        if disconnect is not None:
            await disconnect()


class Web3Signer:
    """
    Signer holding a local private key, broadcasting through a Web3ChainClient.

    Example:
        signer = Web3Signer(chain, private_key, logger_address="0x168F...")
        tx_hash = await signer.send_transaction("0xabc...", 10**18)
    """

    def __init__(
        self,
        chain: Web3ChainClient,
        private_key: str,
        *,
        logger_address: str,
        transfer_gas: int = TRANSFER_GAS,
        contract_gas: int = 300000,
    ):
        from eth_account import Account

        self._chain = chain
        self._account = Account.from_key(private_key)
        self._logger_address = logger_address
        self._transfer_gas = transfer_gas
        self._contract_gas = contract_gas

    async def get_address(self) -> str:
        return self._account.address

    async def _base_tx(self, gas: int) -> dict[str, Any]:
        w3 = self._chain.w3
        return {
            "from": self._account.address,
            "nonce": await w3.eth.get_transaction_count(self._account.address),
            "gas": gas,
            "gasPrice": await w3.eth.gas_price,
            "chainId": await w3.eth.chain_id,
        }

    async def _sign_and_send(self, tx: dict[str, Any]) -> str:
        signed = self._account.sign_transaction(tx)
        tx_hash = await self._chain.w3.eth.send_raw_transaction(signed.raw_transaction)
        return self._chain.w3.to_hex(tx_hash)

    async def send_transaction(self, to: str, value_wei: int, data: bytes = b"") -> str:
        async with _rpc_errors("signer", "Transfer"):
            tx = await self._base_tx(self._transfer_gas + 16 * len(data))
            tx.update({"to": self._chain.w3.to_checksum_address(to), "value": value_wei})
            if data:
                tx["data"] = self._chain.w3.to_hex(data)
            tx_hash = await self._sign_and_send(tx)
        logger.info(f"[web3_signer] Transfer broadcast: {tx_hash}")
        return tx_hash

    async def log_confidential_decision(self, encrypted_thought: bytes, value_wei: int) -> str:
        w3 = self._chain.w3
        async with _rpc_errors("signer", "Confidential decision log"):
            contract = w3.eth.contract(
                address=w3.to_checksum_address(self._logger_address),
                abi=DECISION_LOGGER_ABI,
            )
            base = await self._base_tx(self._contract_gas)
            base["value"] = value_wei
            tx = await contract.functions.logConfidentialDecision(
                encrypted_thought
            ).build_transaction(base)
            tx_hash = await self._sign_and_send(tx)
        logger.info(f"[web3_signer] Confidential decision logged: {tx_hash}")
        return tx_hash
