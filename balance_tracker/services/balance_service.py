"""Balance reconciliation: explorer balances x USD prices -> wallet_balances rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

import httpx
from sqlalchemy.orm import Session

from balance_tracker.core.errors import UnsupportedNetworkError, WalletNotFoundError
from balance_tracker.core.logging import get_logger
from balance_tracker.core.networks import NETWORKS, resolve_network
from balance_tracker.fetchers.base import BaseFetcher, CallOutcome, FetchResult
from balance_tracker.fetchers.evm import EVMBalanceFetcher
from balance_tracker.fetchers.prices import PriceOracle
from balance_tracker.fetchers.tron import TronBalanceFetcher
from balance_tracker.models import ConnectedWallet, WalletBalance
from balance_tracker.services.storage import StorageService

log = get_logger("balance_service")

USD_QUANTUM = Decimal("0.00000001")


@dataclass
class RefreshResult:
    balances: List[WalletBalance] = field(default_factory=list)
    outcomes: List[CallOutcome] = field(default_factory=list)

    @property
    def failed(self) -> List[CallOutcome]:
        return [o for o in self.outcomes if o.status == "failed"]


class BalanceService:
    """Refreshes the cached balances of connected wallets.

    Responsibilities:
    - Resolve the wallet (scoped to the requesting user)
    - Dispatch to the fetcher of the wallet's network family
    - Price all fetched symbols with one oracle call
    - Upsert one row per (user, wallet, token)
    """

    def __init__(
        self,
        db: Session,
        client: Optional[httpx.AsyncClient] = None,
        fetchers: Optional[Mapping[str, BaseFetcher]] = None,
        oracle: Optional[PriceOracle] = None,
    ):
        self.db = db
        self.storage = StorageService(db)
        self.fetchers: Mapping[str, BaseFetcher] = fetchers or {
            "evm": EVMBalanceFetcher(client),
            "tron": TronBalanceFetcher(client),
        }
        self.oracle = oracle or PriceOracle(client)

    async def refresh_balances(self, wallet_id: str, user_id: str) -> List[WalletBalance]:
        result = await self.refresh_with_report(wallet_id, user_id)
        return result.balances

    async def refresh_with_report(self, wallet_id: str, user_id: str) -> RefreshResult:
        wallet = self.storage.get_connected_wallet(user_id, wallet_id)
        if wallet is None:
            raise WalletNotFoundError(wallet_id)
        return await self.refresh_wallet(wallet)

    async def refresh_wallet(self, wallet: ConnectedWallet) -> RefreshResult:
        fetched = await self._fetch(wallet)

        symbols = {b.token_symbol for b in fetched.balances}
        prices = await self.oracle.get_prices(symbols) if symbols else {}

        saved: List[WalletBalance] = []
        for raw in fetched.balances:
            price = prices.get(raw.token_symbol)
            balance_usd = (raw.balance * price).quantize(USD_QUANTUM) if price is not None else None
            saved.append(
                self.storage.upsert_wallet_balance(
                    user_id=wallet.user_id,
                    wallet_id=wallet.id,
                    token_symbol=raw.token_symbol,
                    token_address=raw.token_address,
                    balance=raw.balance,
                    balance_usd=balance_usd,
                )
            )

        if fetched.failed:
            log.warning(
                f"Wallet {wallet.id} ({wallet.network}) refreshed with {len(fetched.failed)} failed calls: "
                + ", ".join(f"{o.label}={o.detail}" for o in fetched.failed)
            )
        log.info(f"Wallet {wallet.id} ({wallet.network}) refreshed | balances={len(saved)} priced={len(prices)}")
        return RefreshResult(balances=saved, outcomes=list(fetched.outcomes))

    async def refresh_all_wallets(self, user_id: Optional[str] = None) -> Dict[str, Any]:
        """Refresh every active, fetchable wallet; one bad wallet does not stop the rest."""
        summary: Dict[str, Any] = {"refreshed": 0, "skipped": 0, "failed": 0, "balances": 0}

        for wallet in self.storage.get_active_wallets(user_id):
            if not self._is_fetchable(wallet.network):
                summary["skipped"] += 1
                continue
            try:
                result = await self.refresh_wallet(wallet)
                summary["refreshed"] += 1
                summary["balances"] += len(result.balances)
            except Exception as exc:  # noqa: BLE001
                self.db.rollback()
                summary["failed"] += 1
                log.error(f"Balance refresh failed for wallet {wallet.id}: {exc}")

        log.info(f"Balance refresh pass complete: {summary}")
        return summary

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------
    async def _fetch(self, wallet: ConnectedWallet) -> FetchResult:
        network = resolve_network(wallet.network)
        family = NETWORKS[network].family
        fetcher = self.fetchers.get(family) if family else None
        if fetcher is None:
            raise UnsupportedNetworkError(wallet.network)
        return await fetcher.fetch(wallet.wallet_address, network)

    @staticmethod
    def _is_fetchable(network: str) -> bool:
        try:
            return NETWORKS[resolve_network(network)].fetchable
        except UnsupportedNetworkError:
            return False
