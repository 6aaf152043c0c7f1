"""Shared types and HTTP plumbing for the balance fetchers and the price oracle."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from decimal import Decimal, localcontext
from typing import Any, AsyncIterator, Dict, List, Literal, Optional

import httpx

from balance_tracker.core.config import settings
from balance_tracker.core.logging import get_logger

log = get_logger("fetchers")

CallStatus = Literal["success", "skipped", "failed"]


@dataclass(frozen=True)
class RawBalance:
    """Decimal-adjusted balance of one token as reported by an explorer."""

    token_symbol: str
    balance: Decimal
    token_address: Optional[str] = None


@dataclass(frozen=True)
class CallOutcome:
    """What happened to a single upstream call.

    ``skipped`` means the call worked but there was nothing to record (zero or
    absent balance); ``failed`` means the upstream could not be used.
    """

    label: str
    status: CallStatus
    detail: Optional[str] = None


@dataclass
class FetchResult:
    balances: List[RawBalance] = field(default_factory=list)
    outcomes: List[CallOutcome] = field(default_factory=list)

    @property
    def failed(self) -> List[CallOutcome]:
        return [o for o in self.outcomes if o.status == "failed"]

    @property
    def ok(self) -> bool:
        return not self.failed

    def record(self, label: str, status: CallStatus, detail: Optional[str] = None) -> None:
        self.outcomes.append(CallOutcome(label=label, status=status, detail=detail))

    def add_balance(self, balance: RawBalance) -> None:
        self.balances.append(balance)
        self.record(balance.token_symbol, "success")


def scale_amount(raw: Any, decimals: int) -> Decimal:
    """Convert an integer on-chain amount into a human balance.

    >>> scale_amount("1000000000000000000", 18)
    Decimal('1')
    >>> scale_amount(5000000, 6)
    Decimal('5')
    """
    with localcontext() as ctx:
        ctx.prec = 80
        return Decimal(int(str(raw).strip())) / (Decimal(10) ** decimals)


@asynccontextmanager
async def open_client(client: Optional[httpx.AsyncClient]) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a short-lived one owned by this call."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as owned:
        yield owned


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    params: Optional[Dict[str, Any]] = None,
) -> Any:
    resp = await client.get(url, params=params)
    resp.raise_for_status()
    return resp.json()


class BaseFetcher(ABC):
    """Abstract base class for per-network-family balance fetchers.

    Implementations never raise: every failure ends up as a ``failed``
    outcome in the returned ``FetchResult``.
    """

    family: str

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self.client = client

    @abstractmethod
    async def fetch(self, address: str, network: str) -> FetchResult:
        """Fetch native and known-token balances for ``address`` on ``network``."""

    async def _call(
        self,
        client: httpx.AsyncClient,
        result: FetchResult,
        label: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Optional[Any]:
        """GET ``url`` and return the decoded JSON, or record a failure and return None."""
        try:
            return await get_json(client, url, params)
        except (httpx.HTTPError, ValueError) as exc:
            log.warning(f"{self.family} call '{label}' failed: {exc}")
            result.record(label, "failed", str(exc))
            return None
