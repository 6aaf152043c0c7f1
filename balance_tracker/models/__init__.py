from balance_tracker.models.base import Base
from balance_tracker.models.user import User
from balance_tracker.models.portfolio import Portfolio, WalletAddress
from balance_tracker.models.wallet import ConnectedWallet, WalletSession, WALLET_TYPES
from balance_tracker.models.balance import WalletBalance
from balance_tracker.models.trading import TradingHistory, TRADE_TYPES, TRADE_STATUSES
from balance_tracker.models.market import MarketData

__all__ = [
    "Base",
    "User",
    "Portfolio",
    "WalletAddress",
    "ConnectedWallet",
    "WalletSession",
    "WALLET_TYPES",
    "WalletBalance",
    "TradingHistory",
    "TRADE_TYPES",
    "TRADE_STATUSES",
    "MarketData",
]
