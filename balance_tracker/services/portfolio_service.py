"""Portfolio service - lazy per-user portfolio with its default deposit addresses."""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from balance_tracker.core.logging import get_logger
from balance_tracker.models import Portfolio
from balance_tracker.services.storage import StorageService

log = get_logger("portfolio_service")

# Network label -> address. Labels resolve through resolve_network (BNB -> bsc, USDT_TRON -> tron).
DEFAULT_ADDRESSES: Tuple[Tuple[str, str], ...] = (
    ("ETH", "0xB36EDa1ffC696FFba07D4Be5cd249FE5E0118130"),
    ("BTC", "bc1qv4fffwt8ux3k33n2dms5cdvuh6suc0gtfevxzu"),
    ("BNB", "0xB36EDa1ffC696FFba07D4Be5cd249FE5E0118130"),
    ("USDT_TRON", "TSt7yoNwGYRbtMMfkSAHE6dPs1cd9rxcco"),
)

UPDATABLE_FIELDS = ("total_balance", "btc_balance", "eth_balance", "bnb_balance", "usdt_balance")


class PortfolioService:
    def __init__(self, db: Session):
        self.storage = StorageService(db)

    def get_or_create(self, user_id: str) -> Portfolio:
        portfolio = self.storage.get_portfolio(user_id)
        if portfolio is not None:
            return portfolio

        portfolio = self.storage.create_portfolio(user_id)
        for label, address in DEFAULT_ADDRESSES:
            self.storage.create_wallet_address(user_id, label, address)
        log.info(f"Created portfolio and {len(DEFAULT_ADDRESSES)} default addresses for user {user_id}")
        return portfolio

    def update(self, user_id: str, changes: Dict[str, Any]) -> Optional[Portfolio]:
        updates = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS and v is not None}
        self.get_or_create(user_id)
        return self.storage.update_portfolio(user_id, updates)
