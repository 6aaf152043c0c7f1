"""CoinGecko price oracle."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Optional

import httpx

from balance_tracker.core.config import settings
from balance_tracker.core.errors import UpstreamUnavailableError
from balance_tracker.core.logging import get_logger
from balance_tracker.core.networks import PRICE_IDS
from .base import get_json, open_client

log = get_logger("fetchers.prices")


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


class PriceOracle:
    """USD quotes for the symbols listed in ``PRICE_IDS``.

    Symbols outside that table are never queried and never returned. A failed
    lookup yields an empty mapping, so a missing key always means "USD value
    unknown".
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, base_url: Optional[str] = None):
        self.client = client
        self.base_url = (base_url or settings.COINGECKO_API_URL).rstrip("/")

    async def get_prices(self, symbols: Iterable[str]) -> Dict[str, Decimal]:
        wanted: Dict[str, str] = {}
        try:
            wanted = {str(s).upper(): PRICE_IDS[str(s).upper()] for s in symbols if s and str(s).upper() in PRICE_IDS}
            if not wanted:
                return {}
            data = await self._simple_price(sorted(set(wanted.values())))
        except Exception as exc:  # noqa: BLE001
            log.warning(f"Failed to fetch token prices for {sorted(wanted)}: {exc}")
            return {}

        prices: Dict[str, Decimal] = {}
        for symbol, coin_id in wanted.items():
            quote = data.get(coin_id) if isinstance(data, dict) else None
            price = _to_decimal(quote.get("usd")) if isinstance(quote, dict) else None
            if price:
                prices[symbol] = price
        return prices

    async def get_market_quotes(self, coin_ids: Iterable[str]) -> Dict[str, Dict[str, Decimal]]:
        """Price, 24h volume and 24h change per CoinGecko id.

        Unlike ``get_prices`` this raises ``UpstreamUnavailableError``; the
        market-data endpoint reports the failure to its caller.
        """
        ids = sorted(set(coin_ids))
        try:
            data = await self._simple_price(ids, include_24hr_vol="true", include_24hr_change="true")
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamUnavailableError(f"CoinGecko quote request failed: {exc}") from exc

        quotes: Dict[str, Dict[str, Decimal]] = {}
        for coin_id in ids:
            values = data.get(coin_id) if isinstance(data, dict) else None
            if not isinstance(values, dict) or _to_decimal(values.get("usd")) is None:
                log.warning(f"No quote returned for {coin_id}")
                continue
            quotes[coin_id] = {
                "price": _to_decimal(values.get("usd")),
                "volume_24h": _to_decimal(values.get("usd_24h_vol")) or Decimal("0"),
                "change_24h": _to_decimal(values.get("usd_24h_change")) or Decimal("0"),
            }
        return quotes

    async def _simple_price(self, ids: list[str], **extra: str) -> Any:
        params = {"ids": ",".join(ids), "vs_currencies": "usd", **extra}
        async with open_client(self.client) as client:
            return await get_json(client, f"{self.base_url}/simple/price", params)


async def get_token_prices(
    symbols: Iterable[str],
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Decimal]:
    return await PriceOracle(client).get_prices(symbols)
