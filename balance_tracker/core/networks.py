"""Static network, token-contract and price-id tables.

Everything here is built once at import and is read-only afterwards. The
fetchers, the reconciler and the bootstrapper all resolve networks through
``resolve_network`` so that the wallet-address labels used by the portfolio
screens (``ETH``, ``BNB``, ``USDT_TRON`` ...) and the connected-wallet network
names (``ethereum``, ``bsc``, ``tron`` ...) can never drift apart silently.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Mapping, Optional, Tuple

from balance_tracker.core.errors import UnsupportedNetworkError

NetworkFamily = Literal["evm", "tron"]


@dataclass(frozen=True)
class NetworkConfig:
    name: str
    display_name: str
    chain_id: str
    family: Optional[NetworkFamily]  # None = stored but not fetchable
    native_symbol: str
    native_decimals: int
    explorer_api_url: Optional[str] = None

    @property
    def fetchable(self) -> bool:
        return self.family is not None


@dataclass(frozen=True)
class TokenContract:
    symbol: str
    address: str
    decimals: int


def _token(symbol: str, address: str) -> TokenContract:
    # USDT/USDC are tracked with 6 decimals, everything else with 18
    decimals = 6 if symbol in ("USDT", "USDC") else 18
    return TokenContract(symbol=symbol, address=address, decimals=decimals)


NETWORKS: Mapping[str, NetworkConfig] = MappingProxyType(
    {
        "ethereum": NetworkConfig(
            name="ethereum",
            display_name="Ethereum",
            chain_id="1",
            family="evm",
            native_symbol="ETH",
            native_decimals=18,
            explorer_api_url="https://api.etherscan.io/api",
        ),
        "bsc": NetworkConfig(
            name="bsc",
            display_name="BNB Smart Chain",
            chain_id="56",
            family="evm",
            native_symbol="BNB",
            native_decimals=18,
            explorer_api_url="https://api.bscscan.com/api",
        ),
        "polygon": NetworkConfig(
            name="polygon",
            display_name="Polygon",
            chain_id="137",
            family="evm",
            native_symbol="MATIC",
            native_decimals=18,
            explorer_api_url="https://api.polygonscan.com/api",
        ),
        "tron": NetworkConfig(
            name="tron",
            display_name="TRON",
            chain_id="728126428",
            family="tron",
            native_symbol="TRX",
            native_decimals=6,
        ),
        "bitcoin": NetworkConfig(
            name="bitcoin",
            display_name="Bitcoin",
            chain_id="bitcoin",
            family=None,
            native_symbol="BTC",
            native_decimals=8,
        ),
    }
)

EVM_NETWORKS: Tuple[str, ...] = tuple(n for n, cfg in NETWORKS.items() if cfg.family == "evm")

TOKEN_CONTRACTS: Mapping[str, Tuple[TokenContract, ...]] = MappingProxyType(
    {
        "ethereum": (
            _token("USDT", "0xdAC17F958D2ee523a2206206994597C13D831ec7"),
            _token("USDC", "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"),
            _token("BNB", "0xB8c77482e45F1F44dE1745F52C74426C631bDD52"),
        ),
        "bsc": (
            _token("USDT", "0x55d398326f99059fF775485246999027B3197955"),
            _token("USDC", "0x8AC76a51cc950d9822D68b83fE1Ad97B32Cd580d"),
            _token("ETH", "0x2170Ed0880ac9A755fd29B2688956BD959F933F8"),
        ),
        "polygon": (
            _token("USDT", "0xc2132D05D31c914a87C6611C10748AEb04B58e8F"),
            _token("USDC", "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174"),
            _token("ETH", "0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619"),
        ),
    }
)

TRON_USDT_CONTRACT = "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t"
TRON_USDT_DEFAULT_DECIMALS = 6

# Token symbol -> CoinGecko id
PRICE_IDS: Mapping[str, str] = MappingProxyType(
    {
        "BTC": "bitcoin",
        "ETH": "ethereum",
        "BNB": "binancecoin",
        "USDT": "tether",
        "USDC": "usd-coin",
        "MATIC": "matic-network",
        "TRX": "tron",
    }
)

# Every accepted spelling -> canonical network name. Lookups are case-insensitive.
NETWORK_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "ethereum": "ethereum",
        "eth": "ethereum",
        "bsc": "bsc",
        "bnb": "bsc",
        "binance": "bsc",
        "bnb smart chain": "bsc",
        "polygon": "polygon",
        "matic": "polygon",
        "tron": "tron",
        "trx": "tron",
        "usdt_tron": "tron",
        "bitcoin": "bitcoin",
        "btc": "bitcoin",
    }
)


def resolve_network(name: Optional[str]) -> str:
    """Return the canonical network name for any accepted spelling."""
    if not name:
        raise UnsupportedNetworkError(name)
    canonical = NETWORK_ALIASES.get(name.strip().lower())
    if canonical is None:
        raise UnsupportedNetworkError(name)
    return canonical


def get_network(name: Optional[str]) -> NetworkConfig:
    return NETWORKS[resolve_network(name)]
