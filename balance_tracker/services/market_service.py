"""Market data cache refreshed from CoinGecko."""

from __future__ import annotations

from typing import Iterable, List, Optional

import httpx
from sqlalchemy.orm import Session

from balance_tracker.core.logging import get_logger
from balance_tracker.fetchers.prices import PriceOracle
from balance_tracker.models import MarketData
from balance_tracker.services.storage import StorageService

log = get_logger("market_service")

DEFAULT_MARKET_IDS = ("bitcoin", "ethereum", "binancecoin")


class MarketDataService:
    def __init__(self, db: Session, client: Optional[httpx.AsyncClient] = None, oracle: Optional[PriceOracle] = None):
        self.storage = StorageService(db)
        self.oracle = oracle or PriceOracle(client)

    async def refresh(self, coin_ids: Iterable[str] = DEFAULT_MARKET_IDS) -> List[MarketData]:
        """Fetch fresh quotes and upsert one row per id.

        Raises ``UpstreamUnavailableError`` when CoinGecko cannot be reached.
        """
        quotes = await self.oracle.get_market_quotes(coin_ids)
        rows = [
            self.storage.upsert_market_data(
                symbol=coin_id,
                price=values["price"],
                volume_24h=values["volume_24h"],
                change_24h=values["change_24h"],
            )
            for coin_id, values in quotes.items()
        ]
        log.info(f"Market data refreshed for {len(rows)} ids")
        return rows

    def cached(self, coin_ids: Iterable[str] = DEFAULT_MARKET_IDS) -> List[MarketData]:
        return self.storage.get_market_data(coin_ids)
