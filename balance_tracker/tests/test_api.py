"""API endpoint tests"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import httpx
import pytest
from fastapi.testclient import TestClient

from balance_tracker.api.deps import get_db, get_http_client
from balance_tracker.core.config import settings
from balance_tracker.main import app
from balance_tracker.services.storage import StorageService
from conftest import EVM_ADDRESS, OTHER_USER_ID, USER_ID, explorer_handler

ETHERSCAN = "api.etherscan.io"
HEADERS = {"X-User-Id": USER_ID}
OTHER_HEADERS = {"X-User-Id": OTHER_USER_ID}


class FakeUpstream:
    """Swappable handler behind the overridden HTTP client dependency"""

    def __init__(self):
        self.handler = explorer_handler({})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        return self.handler(request)


class TestAPI:
    """Test API endpoints"""

    @pytest.fixture
    def upstream(self):
        return FakeUpstream()

    @pytest.fixture
    def client(self, db, upstream):
        """Create test client bound to the test database and fake upstreams"""

        def override_db():
            yield db

        async def override_http():
            async with httpx.AsyncClient(transport=httpx.MockTransport(upstream)) as http:
                yield http

        app.dependency_overrides[get_db] = override_db
        app.dependency_overrides[get_http_client] = override_http
        try:
            yield TestClient(app)
        finally:
            app.dependency_overrides.clear()

    def _connect(self, client, network="ethereum", headers=HEADERS, address=EVM_ADDRESS):
        response = client.post(
            "/api/wallets/connect",
            json={"walletType": "metamask", "walletAddress": address, "network": network},
            headers=headers,
        )
        assert response.status_code == 200
        return response.json()

    # -------------------------------------------------------------------------
    # Health & users
    # -------------------------------------------------------------------------
    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["database"] == "ok"

    def test_readiness(self, client):
        assert client.get("/health/ready").json()["status"] == "ready"

    def test_missing_user_header_is_unauthorized(self, client):
        assert client.get("/api/wallets/connected").status_code == 401
        assert client.get("/api/auth/user").status_code == 401

    def test_auth_user_and_admin(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ADMIN_EMAILS", "boss@example.com")

        me = client.get("/api/auth/user", headers={**HEADERS, "X-User-Email": "Boss@Example.com"}).json()
        assert me["id"] == USER_ID
        assert me["isAdmin"] is True

        assert client.get("/api/admin/users", headers=OTHER_HEADERS).status_code == 403
        users = client.get("/api/admin/users", headers=HEADERS).json()
        assert {u["id"] for u in users} == {USER_ID, OTHER_USER_ID}

    # -------------------------------------------------------------------------
    # Portfolio
    # -------------------------------------------------------------------------
    def test_portfolio_created_on_first_access(self, client):
        portfolio = client.get("/api/portfolio", headers=HEADERS).json()
        assert Decimal(portfolio["totalBalance"]) == 0

        updated = client.patch("/api/portfolio", json={"btcBalance": "0.5"}, headers=HEADERS).json()
        assert Decimal(updated["btcBalance"]) == Decimal("0.5")
        assert updated["id"] == portfolio["id"]

    def test_wallet_addresses_carry_canonical_network(self, client):
        addresses = client.get("/api/wallet-addresses", headers=HEADERS).json()
        mapping = {a["network"]: a["canonicalNetwork"] for a in addresses}
        assert mapping == {"BNB": "bsc", "BTC": "bitcoin", "ETH": "ethereum", "USDT_TRON": "tron"}

    # -------------------------------------------------------------------------
    # Wallets
    # -------------------------------------------------------------------------
    def test_connected_wallets_seeded_for_new_user(self, client):
        wallets = client.get("/api/wallets/connected", headers=HEADERS).json()
        assert sorted(w["network"] for w in wallets) == ["bitcoin", "bsc", "ethereum", "tron"]
        # zero balances everywhere: nothing stored
        assert client.get("/api/wallets/balances", headers=HEADERS).json() == []

    def test_connect_validates_network(self, client):
        wallet = self._connect(client, network="BNB")
        assert wallet["network"] == "bsc"
        assert wallet["chainId"] == "56"

        bad = client.post(
            "/api/wallets/connect",
            json={"walletType": "metamask", "walletAddress": EVM_ADDRESS, "network": "solana"},
            headers=HEADERS,
        )
        assert bad.status_code == 400

        bad_type = client.post(
            "/api/wallets/connect",
            json={"walletType": "paper", "walletAddress": EVM_ADDRESS, "network": "ethereum"},
            headers=HEADERS,
        )
        assert bad_type.status_code == 422

    def test_refresh_and_read_balances(self, client, upstream):
        wallet = self._connect(client)
        upstream.handler = explorer_handler(
            {ETHERSCAN: {None: "1500000000000000000"}},
            prices={"ethereum": 2000},
        )

        response = client.post(f"/api/wallets/{wallet['id']}/balances/refresh", headers=HEADERS)
        assert response.status_code == 200
        body = response.json()
        assert [b["tokenSymbol"] for b in body["balances"]] == ["ETH"]
        assert Decimal(body["balances"][0]["balanceUSD"]) == Decimal("3000")
        assert {o["status"] for o in body["outcomes"]} == {"success", "skipped"}

        stored = client.get(f"/api/wallets/{wallet['id']}/balances", headers=HEADERS).json()
        assert Decimal(stored[0]["balance"]) == Decimal("1.5")

    def test_refresh_other_users_wallet_is_404(self, client):
        wallet = self._connect(client, headers=OTHER_HEADERS)
        assert client.post(f"/api/wallets/{wallet['id']}/balances/refresh", headers=HEADERS).status_code == 404
        assert client.get(f"/api/wallets/{wallet['id']}/balances", headers=HEADERS).status_code == 404

    def test_refresh_bitcoin_wallet_is_400(self, client):
        wallet = self._connect(client, network="bitcoin", address="bc1qexample")
        assert client.post(f"/api/wallets/{wallet['id']}/balances/refresh", headers=HEADERS).status_code == 400

    def test_disconnect(self, client, upstream):
        wallet = self._connect(client)
        upstream.handler = explorer_handler({ETHERSCAN: {None: "1000000000000000000"}})
        client.post(f"/api/wallets/{wallet['id']}/balances/refresh", headers=HEADERS)

        assert client.delete(f"/api/wallets/{wallet['id']}/disconnect", headers=HEADERS).json() == {"success": True}
        assert client.get("/api/wallets/balances", headers=HEADERS).json() == []
        assert client.delete(f"/api/wallets/{wallet['id']}/disconnect", headers=HEADERS).status_code == 404

    def test_wallet_sessions(self, client):
        wallet = self._connect(client)
        created = client.post(f"/api/wallets/{wallet['id']}/sessions", json={}, headers=HEADERS)
        assert created.status_code == 201
        token = created.json()["sessionToken"]

        assert client.get(f"/api/wallets/sessions/{token}", headers=HEADERS).json()["walletId"] == wallet["id"]
        assert client.get(f"/api/wallets/sessions/{token}", headers=OTHER_HEADERS).status_code == 404

    def test_expired_wallet_session_is_404(self, client, db):
        wallet = self._connect(client)
        token = client.post(f"/api/wallets/{wallet['id']}/sessions", json={}, headers=HEADERS).json()["sessionToken"]

        session = StorageService(db).get_wallet_session(token)
        session.expires_at = datetime.now(timezone.utc) - timedelta(hours=1)
        db.commit()

        assert client.get(f"/api/wallets/sessions/{token}", headers=HEADERS).status_code == 404

    # -------------------------------------------------------------------------
    # Trading history & market data
    # -------------------------------------------------------------------------
    def test_trading_history(self, client):
        trade = {"pair": "ETH/USDT", "type": "buy", "amount": "1", "price": "2000", "total": "2000"}
        created = client.post("/api/trading-history", json=trade, headers=HEADERS)
        assert created.status_code == 201
        assert created.json()["status"] == "completed"

        history = client.get("/api/trading-history", headers=HEADERS).json()
        assert [t["pair"] for t in history] == ["ETH/USDT"]
        assert client.get("/api/trading-history", headers=OTHER_HEADERS).json() == []

        unknown_wallet = client.post("/api/trading-history", json={**trade, "walletId": "nope"}, headers=HEADERS)
        assert unknown_wallet.status_code == 404

    def test_market_data_refresh_and_cache(self, client, upstream):
        quotes = {
            "bitcoin": {"usd": 60000, "usd_24h_vol": 1000, "usd_24h_change": 1.5},
            "ethereum": {"usd": 3000, "usd_24h_vol": 500, "usd_24h_change": -0.5},
            "binancecoin": {"usd": 500, "usd_24h_vol": 100, "usd_24h_change": 0},
        }
        upstream.handler = lambda request: httpx.Response(200, json=quotes)

        rows = client.get("/api/market-data").json()
        assert [r["symbol"] for r in rows] == ["binancecoin", "bitcoin", "ethereum"]

        cached = client.get("/api/market-data/cached", params={"symbols": "bitcoin,ethereum"}).json()
        assert [r["symbol"] for r in cached] == ["bitcoin", "ethereum"]
        assert Decimal(cached[1]["change24h"]) == Decimal("-0.5")

    def test_market_data_upstream_failure_is_502(self, client, upstream):
        upstream.handler = lambda request: httpx.Response(503)
        assert client.get("/api/market-data").status_code == 502

    def test_new_user_end_to_end(self, client, upstream):
        """Seeded wallets are refreshed and only priced symbols get a USD value"""
        upstream.handler = explorer_handler(
            {
                ETHERSCAN: {None: "2000000000000000000"},
                "api.bscscan.com": {None: "3000000000000000000"},
            },
            prices={"ethereum": 1500},
            tron_trx=1_000_000,
        )

        wallets = client.get("/api/wallets/connected", headers=HEADERS).json()
        assert len(wallets) == 4

        balances = client.get("/api/wallets/balances", headers=HEADERS).json()
        usd = {b["tokenSymbol"]: b["balanceUSD"] for b in balances}
        assert set(usd) == {"ETH", "BNB", "TRX"}
        assert Decimal(usd["ETH"]) == Decimal("3000")
        assert usd["BNB"] is None
        assert usd["TRX"] is None
