from balance_tracker.api.routes.health import router as health_router
from balance_tracker.api.routes.market import router as market_router
from balance_tracker.api.routes.portfolio import router as portfolio_router
from balance_tracker.api.routes.trading import router as trading_router
from balance_tracker.api.routes.users import router as users_router
from balance_tracker.api.routes.wallets import router as wallets_router

__all__ = [
    "health_router",
    "market_router",
    "portfolio_router",
    "trading_router",
    "users_router",
    "wallets_router",
]
