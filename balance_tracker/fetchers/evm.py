"""Ethereum-style explorer fetcher (Etherscan, BscScan, PolygonScan)."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from balance_tracker.core.config import settings
from balance_tracker.core.logging import get_logger
from balance_tracker.core.networks import NETWORKS, TOKEN_CONTRACTS, NetworkConfig, TokenContract
from .base import BaseFetcher, FetchResult, RawBalance, open_client, scale_amount

log = get_logger("fetchers.evm")


class EVMBalanceFetcher(BaseFetcher):
    """Native-coin balance plus the static token-contract list of one EVM network.

    Calls are issued one after another; a token that fails or holds nothing is
    simply absent from the result.
    """

    family = "evm"

    async def fetch(self, address: str, network: str) -> FetchResult:
        config = NETWORKS.get(network)
        if config is None or config.family != self.family:
            result = FetchResult()
            result.record(network, "failed", "not an EVM network")
            return result

        try:
            result = FetchResult()
            async with open_client(self.client) as client:
                await self._fetch_native(client, result, address, config)
                for token in TOKEN_CONTRACTS.get(network, ()):
                    await self._fetch_token(client, result, address, config, token)
        except Exception as exc:  # noqa: BLE001
            log.error(f"Failed to fetch {network} balances for {address}: {exc}")
            result = FetchResult()
            result.record(network, "failed", str(exc))
            return result

        log.info(
            f"{network} {address}: {len(result.balances)} balances, "
            f"{len(result.failed)} failed calls"
        )
        return result

    async def _fetch_native(
        self,
        client: httpx.AsyncClient,
        result: FetchResult,
        address: str,
        config: NetworkConfig,
    ) -> None:
        params = self._params(action="balance", address=address)
        payload = await self._call(client, result, config.native_symbol, config.explorer_api_url, params)
        if payload is None:
            return

        raw = self._explorer_amount(payload, config.native_symbol, result)
        if raw is None:
            return

        result.add_balance(
            RawBalance(
                token_symbol=config.native_symbol,
                balance=scale_amount(raw, config.native_decimals),
                token_address=None,
            )
        )

    async def _fetch_token(
        self,
        client: httpx.AsyncClient,
        result: FetchResult,
        address: str,
        config: NetworkConfig,
        token: TokenContract,
    ) -> None:
        params = self._params(action="tokenbalance", address=address, contractaddress=token.address)
        payload = await self._call(client, result, token.symbol, config.explorer_api_url, params)
        if payload is None:
            return

        raw = self._explorer_amount(payload, token.symbol, result)
        if raw is None:
            return

        result.add_balance(
            RawBalance(
                token_symbol=token.symbol,
                balance=scale_amount(raw, token.decimals),
                token_address=token.address,
            )
        )

    @staticmethod
    def _params(**extra: str) -> Dict[str, Any]:
        params: Dict[str, Any] = {"module": "account", "tag": "latest", **extra}
        if settings.ETHERSCAN_API_KEY:
            params["apikey"] = settings.ETHERSCAN_API_KEY
        return params

    @staticmethod
    def _explorer_amount(payload: Any, label: str, result: FetchResult) -> Optional[int]:
        """Extract a non-zero raw amount from an explorer response.

        Explorers answer ``{"status": "1", "result": "<int>"}`` on success and
        ``{"status": "0", "message": "NOTOK", "result": "<reason>"}`` on error.
        """
        if not isinstance(payload, dict) or payload.get("status") != "1":
            reason = payload.get("result") or payload.get("message") if isinstance(payload, dict) else None
            result.record(label, "failed", str(reason or "unexpected explorer response"))
            return None

        try:
            raw = int(str(payload.get("result")).strip())
        except (TypeError, ValueError):
            result.record(label, "failed", f"non-numeric result: {payload.get('result')!r}")
            return None

        if raw == 0:
            result.record(label, "skipped", "zero balance")
            return None
        return raw


async def fetch_evm_balance(
    address: str,
    network: str,
    client: Optional[httpx.AsyncClient] = None,
) -> List[RawBalance]:
    """Balances only; outcomes are dropped."""
    result = await EVMBalanceFetcher(client).fetch(address, network)
    return result.balances
