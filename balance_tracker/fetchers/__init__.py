from balance_tracker.fetchers.base import BaseFetcher, CallOutcome, FetchResult, RawBalance, scale_amount
from balance_tracker.fetchers.evm import EVMBalanceFetcher, fetch_evm_balance
from balance_tracker.fetchers.tron import TronBalanceFetcher, fetch_tron_balance
from balance_tracker.fetchers.prices import PriceOracle, get_token_prices

__all__ = [
    "BaseFetcher",
    "CallOutcome",
    "FetchResult",
    "RawBalance",
    "scale_amount",
    "EVMBalanceFetcher",
    "fetch_evm_balance",
    "TronBalanceFetcher",
    "fetch_tron_balance",
    "PriceOracle",
    "get_token_prices",
]
