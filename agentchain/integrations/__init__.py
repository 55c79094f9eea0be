"""
AgentChain Integrations

External collaborators consumed by the tool executor:

- coinbase: spot/buy/sell price oracle
- dexscreener: liquidity oracle
- inco: confidential-compute (FHE encryption) collaborator
- chain: chain RPC reader and wallet signer (web3.py)
"""

from .base import (
    AuthenticationError,
    IntegrationClient,
    IntegrationConfig,
    IntegrationError,
    NotFoundError,
    PermanentIntegrationError,
    RateLimitError,
    ServiceUnreachableError,
    ValidationError,
    error_for_response,
    error_for_transport,
)
from .chain import (
    DECISION_LOGGER_ABI,
    TRANSFER_GAS,
    ChainReader,
    NetworkInfo,
    Signer,
    TransactionReceipt,
    Web3ChainClient,
    Web3Signer,
)
from .coinbase import CoinbasePriceClient, PriceQuote
from .dexscreener import DexScreenerClient, LiquidityPool
from .inco import (
    ZERO_ADDRESS,
    ConfidentialCompute,
    HandleType,
    IncoGatewayClient,
    normalize_for_handle,
)

__all__ = [
    # Base
    "IntegrationClient",
    "IntegrationConfig",
    "IntegrationError",
    "PermanentIntegrationError",
    "ServiceUnreachableError",
    "AuthenticationError",
    "RateLimitError",
    "NotFoundError",
    "ValidationError",
    "error_for_response",
    "error_for_transport",
    # Chain
    "ChainReader",
    "Signer",
    "NetworkInfo",
    "TransactionReceipt",
    "Web3ChainClient",
    "Web3Signer",
    "TRANSFER_GAS",
    "DECISION_LOGGER_ABI",
    # Oracles
    "CoinbasePriceClient",
    "PriceQuote",
    "DexScreenerClient",
    "LiquidityPool",
    # Confidential compute
    "ConfidentialCompute",
    "HandleType",
    "IncoGatewayClient",
    "normalize_for_handle",
    "ZERO_ADDRESS",
]
