"""Shared fixtures: in-memory SQLite database and mocked third-party HTTP."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from typing import Callable, Dict, Optional  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from balance_tracker.models import Base  # noqa: E402
from balance_tracker.services.storage import StorageService  # noqa: E402

USER_ID = "user-1"
OTHER_USER_ID = "user-2"

EVM_ADDRESS = "0x1111111111111111111111111111111111111111"
TRON_ADDRESS = "TXYZabcdefghijkmnopqrstuvwxyz12345"


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def users(db):
    storage = StorageService(db)
    storage.upsert_user(USER_ID)
    storage.upsert_user(OTHER_USER_ID)
    return USER_ID, OTHER_USER_ID


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def explorer_handler(
    amounts: Dict[str, Dict[Optional[str], str]],
    prices: Optional[Dict[str, float]] = None,
    tron_trx: int = 0,
    tron_tokens: Optional[list] = None,
    failing_hosts: tuple = (),
) -> Callable[[httpx.Request], httpx.Response]:
    """Build a fake for the block explorers, TronGrid and CoinGecko.

    ``amounts`` maps explorer host -> {contract address or None for native -> raw amount}.
    Anything not listed answers with a zero balance.
    """
    prices = prices or {}
    tron_tokens = tron_tokens or []

    def handler(request: httpx.Request) -> httpx.Response:
        host = request.url.host
        if host in failing_hosts:
            return httpx.Response(500, json={"error": "boom"})

        if host == "api.coingecko.com":
            ids = request.url.params.get("ids", "").split(",")
            body = {i: {"usd": prices[i]} for i in ids if i in prices}
            return httpx.Response(200, json=body)

        if host == "api.trongrid.io":
            if request.url.path.endswith("/tokens"):
                return httpx.Response(200, json={"data": tron_tokens, "success": True})
            data = [{"balance": tron_trx}] if tron_trx else []
            return httpx.Response(200, json={"data": data, "success": True})

        per_host = amounts.get(host, {})
        contract = request.url.params.get("contractaddress")
        raw = per_host.get(contract, "0")
        return httpx.Response(200, json={"status": "1", "message": "OK", "result": raw})

    return handler
