from pathlib import Path
from contextlib import asynccontextmanager
import asyncio
from typing import Optional

import httpx
from alembic import command
from alembic.config import Config
from fastapi import FastAPI

from balance_tracker.api.routes import (
    health_router,
    market_router,
    portfolio_router,
    trading_router,
    users_router,
    wallets_router,
)
from balance_tracker.core.config import settings
from balance_tracker.core.db import SessionLocal
from balance_tracker.core.logging import get_logger
from balance_tracker.services.balance_service import BalanceService


log = get_logger("app")

# Background task handle
_refresh_task: Optional[asyncio.Task] = None


def run_migrations() -> None:
    """Execute Alembic migrations programmatically on startup."""
    project_root = Path(__file__).resolve().parent.parent
    alembic_cfg = Config(str(project_root / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
    log.info("Running Alembic migrations to head")
    command.upgrade(alembic_cfg, "head")
    log.info("Alembic migrations applied")


async def run_balance_refresh(user_id: Optional[str] = None) -> dict:
    """Refresh the balances of every active wallet (or of one user's wallets)."""
    log.info("Starting balance refresh pass...")
    async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
        with SessionLocal() as db:
            service = BalanceService(db, client=client)
            return await service.refresh_all_wallets(user_id)


async def scheduled_refresh_task() -> None:
    """Background task that refreshes balances at the configured interval."""
    interval = settings.BALANCE_REFRESH_INTERVAL_SECONDS
    log.info(f"Scheduled balance refresh started (interval: {interval}s)")

    while True:
        try:
            await run_balance_refresh()
            await asyncio.sleep(interval)
        except asyncio.CancelledError:
            log.info("Scheduled balance refresh cancelled")
            break
        except Exception as exc:
            log.exception(f"Scheduled balance refresh error: {exc}")
            # Continue running despite errors
            await asyncio.sleep(interval)


@asynccontextmanager
async def lifespan(app: FastAPI):
    global _refresh_task

    log.info(f"Starting application in {settings.ENV.upper()} mode")
    if settings.is_production:
        log.info("Production mode: Debug disabled, docs disabled, stricter logging")
    else:
        log.info("Development mode: Debug enabled, docs available")

    try:
        run_migrations()
    except Exception:
        log.exception("Failed to apply migrations on startup")
        raise

    if settings.BALANCE_REFRESH_ENABLED:
        log.info("Starting scheduled balance refresh task...")
        _refresh_task = asyncio.create_task(scheduled_refresh_task())
    else:
        log.info("Scheduled balance refresh is disabled (BALANCE_REFRESH_ENABLED=false)")

    yield

    log.info("Shutting down services...")
    if _refresh_task:
        log.info("Cancelling scheduled balance refresh task...")
        _refresh_task.cancel()
        try:
            await _refresh_task
        except asyncio.CancelledError:
            pass
        _refresh_task = None

    log.info("Application shutdown complete")


app = FastAPI(
    title="Wallet Balance Tracker",
    description="Connected crypto wallets with on-chain balances priced in USD",
    version="1.0.0",
    lifespan=lifespan,
    # Disable docs in production for security
    docs_url="/docs" if settings.docs_enabled else None,
    redoc_url="/redoc" if settings.docs_enabled else None,
    openapi_url="/openapi.json" if settings.docs_enabled else None,
    debug=settings.debug_enabled,
)


app.include_router(users_router)
app.include_router(portfolio_router)
app.include_router(trading_router)
app.include_router(market_router)
app.include_router(wallets_router)
app.include_router(health_router)
