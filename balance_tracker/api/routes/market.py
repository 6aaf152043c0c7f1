"""Market data routes - CoinGecko quotes cached in market_data."""

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from balance_tracker.api.deps import get_db, get_http_client
from balance_tracker.core.errors import UpstreamUnavailableError
from balance_tracker.core.logging import get_logger
from balance_tracker.schemas.api import MarketDataOut
from balance_tracker.services.market_service import DEFAULT_MARKET_IDS, MarketDataService

router = APIRouter(prefix="/api/market-data", tags=["market"])
log = get_logger("market_routes")


@router.get("", response_model=list[MarketDataOut])
async def get_market_data(
    db: Session = Depends(get_db),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Refresh quotes for the default coins and return the stored rows."""
    service = MarketDataService(db, client=client)
    try:
        await service.refresh(DEFAULT_MARKET_IDS)
    except UpstreamUnavailableError as exc:
        log.error(f"Market data refresh failed: {exc}")
        raise HTTPException(status_code=502, detail="Failed to fetch market data")
    return [MarketDataOut.model_validate(m) for m in service.cached(DEFAULT_MARKET_IDS)]


@router.get("/cached", response_model=list[MarketDataOut])
def get_cached_market_data(
    symbols: str = Query(",".join(DEFAULT_MARKET_IDS), description="Comma-separated CoinGecko ids"),
    db: Session = Depends(get_db),
):
    wanted = [s.strip() for s in symbols.split(",") if s.strip()]
    return [MarketDataOut.model_validate(m) for m in MarketDataService(db).cached(wanted)]
