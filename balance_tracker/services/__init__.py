# Services package
from balance_tracker.services.balance_service import BalanceService, RefreshResult
from balance_tracker.services.bootstrap_service import WalletBootstrapper
from balance_tracker.services.market_service import MarketDataService
from balance_tracker.services.portfolio_service import PortfolioService
from balance_tracker.services.storage import StorageService
from balance_tracker.services.wallet_service import WalletService

__all__ = [
    "BalanceService",
    "RefreshResult",
    "WalletBootstrapper",
    "MarketDataService",
    "PortfolioService",
    "StorageService",
    "WalletService",
]
