"""TronGrid fetcher: TRX plus USDT-TRC20."""

from __future__ import annotations

from typing import Any, List, Optional

import httpx

from balance_tracker.core.config import settings
from balance_tracker.core.logging import get_logger
from balance_tracker.core.networks import NETWORKS, TRON_USDT_CONTRACT, TRON_USDT_DEFAULT_DECIMALS
from .base import BaseFetcher, FetchResult, RawBalance, open_client, scale_amount

log = get_logger("fetchers.tron")


class TronBalanceFetcher(BaseFetcher):
    family = "tron"

    def __init__(self, client: Optional[httpx.AsyncClient] = None, base_url: Optional[str] = None):
        super().__init__(client)
        self.base_url = (base_url or settings.TRONGRID_API_URL).rstrip("/")

    async def fetch(self, address: str, network: str = "tron") -> FetchResult:
        try:
            result = FetchResult()
            async with open_client(self.client) as client:
                await self._fetch_trx(client, result, address)
                await self._fetch_usdt(client, result, address)
        except Exception as exc:  # noqa: BLE001
            log.error(f"Failed to fetch TRON balances for {address}: {exc}")
            result = FetchResult()
            result.record("tron", "failed", str(exc))
            return result

        log.info(f"tron {address}: {len(result.balances)} balances, {len(result.failed)} failed calls")
        return result

    async def _fetch_trx(self, client: httpx.AsyncClient, result: FetchResult, address: str) -> None:
        config = NETWORKS["tron"]
        payload = await self._call(client, result, config.native_symbol, f"{self.base_url}/v1/accounts/{address}")
        if payload is None:
            return

        accounts = payload.get("data") if isinstance(payload, dict) else None
        if not accounts:
            # Accounts that never received TRX are not activated yet
            result.record(config.native_symbol, "skipped", "account not found")
            return

        raw = accounts[0].get("balance") or 0
        if int(raw) <= 0:
            result.record(config.native_symbol, "skipped", "zero balance")
            return

        result.add_balance(
            RawBalance(
                token_symbol=config.native_symbol,
                balance=scale_amount(raw, config.native_decimals),
                token_address=None,
            )
        )

    async def _fetch_usdt(self, client: httpx.AsyncClient, result: FetchResult, address: str) -> None:
        payload = await self._call(
            client,
            result,
            "USDT",
            f"{self.base_url}/v1/accounts/{address}/tokens",
            {"type": "trc20"},
        )
        if payload is None:
            return

        tokens: List[Any] = (payload.get("data") if isinstance(payload, dict) else None) or []
        token = next((t for t in tokens if t.get("token_address") == TRON_USDT_CONTRACT), None)
        if token is None:
            result.record("USDT", "skipped", "token not held")
            return

        raw = int(str(token.get("balance") or 0))
        if raw <= 0:
            result.record("USDT", "skipped", "zero balance")
            return

        decimals = int(token.get("token_decimal") or TRON_USDT_DEFAULT_DECIMALS)
        result.add_balance(
            RawBalance(
                token_symbol="USDT",
                balance=scale_amount(raw, decimals),
                token_address=TRON_USDT_CONTRACT,
            )
        )


async def fetch_tron_balance(address: str, client: Optional[httpx.AsyncClient] = None) -> List[RawBalance]:
    """Balances only; outcomes are dropped."""
    result = await TronBalanceFetcher(client).fetch(address)
    return result.balances
