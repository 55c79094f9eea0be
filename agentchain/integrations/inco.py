"""
Confidential-compute collaborator (Inco Lightning).

Values are encrypted into FHE handles before they touch the chain. The
collaborator contract is:

    encrypt(value, account_address, dapp_address, handle_type) -> ciphertext

Values must be normalized to the handle's numeric width first; see
normalize_for_handle(). IncoGatewayClient reaches an encryption service
over HTTP:

    POST /encrypt
    {"value": "<decimal int or true/false>", "handleType": "euint256",
     "accountAddress": "0x..", "dappAddress": "0x.."}
    -> {"ciphertext": "0x..."}
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Protocol, runtime_checkable

import httpx

from .base import IntegrationClient, IntegrationConfig, IntegrationError

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class HandleType(str, Enum):
    """Encrypted value types supported by Inco Lightning."""

    EBOOL = "ebool"
    EUINT8 = "euint8"
    EUINT16 = "euint16"
    EUINT32 = "euint32"
    EUINT64 = "euint64"
    EUINT128 = "euint128"
    EUINT160 = "euint160"
    EUINT256 = "euint256"

    @property
    def bits(self) -> int:
        if self is HandleType.EBOOL:
            return 1
        return int(self.value.removeprefix("euint"))

    @classmethod
    def from_type_name(cls, type_name: str | None) -> HandleType:
        """
        Map a simplified type name (uint8, bool, address, ...) to a handle type.

        Unknown names default to euint32. Addresses are uint160.
        """
        name = (type_name or "uint32").strip().lower()
        if name == "bool":
            return cls.EBOOL
        if name == "address":
            return cls.EUINT160
        try:
            return cls(f"e{name}")
        except ValueError:
            return cls.EUINT32


def _string_signature(text: str, bits: int) -> int:
    """Deterministic numeric signature of free text, truncated to `bits`."""
    value = 0
    for char in text:
        value = (value << 5) - value + ord(char)
    return value & ((1 << bits) - 1)


def normalize_for_handle(value: int | bool | str, handle_type: HandleType) -> int | bool:
    """
    Convert a value to something the handle type can hold.

    - ebool: booleans, or the string "true" (case-insensitive)
    - euintN: ints as-is; strings use their first integer run
      ("50 SHM" -> 50) or, without digits, a numeric signature of the text

    Raises:
        ValueError: If a numeric value is negative or wider than the handle
    """
    if handle_type is HandleType.EBOOL:
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return bool(value)

    bits = handle_type.bits

    if isinstance(value, bool):
        number = int(value)
    elif isinstance(value, int):
        number = value
    else:
        match = re.search(r"\d+", value)
        if match is None:
            return _string_signature(value, bits)
        number = int(match.group(0))

    if number < 0 or number.bit_length() > bits:
        raise ValueError(f"Value {number} does not fit in {handle_type.value}")
    return number


@runtime_checkable
class ConfidentialCompute(Protocol):
    """Encrypts values into confidential handles."""

    async def encrypt(
        self,
        value: int | bool,
        *,
        account_address: str,
        dapp_address: str,
        handle_type: HandleType,
    ) -> str:
        """Return the ciphertext (hex string) for an already-normalized value."""
        ...


class IncoGatewayClient(IntegrationClient):
    """
    HTTP bridge to an Inco Lightning encryption service.

    Example:
        client = IncoGatewayClient(IntegrationConfig(base_url="http://localhost:8545"))
        ciphertext = await client.encrypt(
            10**18,
            account_address=address,
            dapp_address=logger_address,
            handle_type=HandleType.EUINT256,
        )
    """

    def __init__(
        self,
        config: IntegrationConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(config, transport=transport)

    @property
    def name(self) -> str:
        return "inco"

    def _get_auth_headers(self) -> dict[str, str]:
        if self.config.api_key:
            return {"Authorization": f"Bearer {self.config.api_key}"}
        return {}

    async def encrypt(
        self,
        value: int | bool,
        *,
        account_address: str,
        dapp_address: str,
        handle_type: HandleType,
    ) -> str:
        payload_value = str(value).lower() if isinstance(value, bool) else str(value)
        logger.info(f"[inco] Encrypting value as {handle_type.value}")

        response = await self._request(
            "POST",
            "/encrypt",
            json={
                "value": payload_value,
                "handleType": handle_type.value,
                "accountAddress": account_address or ZERO_ADDRESS,
                "dappAddress": dapp_address or ZERO_ADDRESS,
            },
        )

        ciphertext = response.json().get("ciphertext")
        if not ciphertext:
            raise IntegrationError("Received empty ciphertext", self.name)
        return str(ciphertext)
