"""Storage layer tests"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from balance_tracker.models import TradingHistory, WalletBalance, WalletSession
from balance_tracker.services.storage import TRADING_HISTORY_LIMIT, StorageService
from conftest import EVM_ADDRESS, OTHER_USER_ID, USER_ID


def _wallet(storage, user_id=USER_ID, network="ethereum", address=EVM_ADDRESS):
    return storage.create_connected_wallet(
        user_id=user_id,
        wallet_type="metamask",
        wallet_address=address,
        chain_id="1",
        network=network,
    )


class TestUsers:
    def test_upsert_user_updates_in_place(self, db):
        storage = StorageService(db)
        storage.upsert_user("u-42", email="a@example.com")
        user = storage.upsert_user("u-42", email="b@example.com", is_admin=True)

        assert user.email == "b@example.com"
        assert user.is_admin is True
        assert [u.id for u in storage.list_users()] == ["u-42"]


class TestWalletBalances:
    def test_upsert_keeps_one_row_per_token(self, db, users):
        storage = StorageService(db)
        wallet = _wallet(storage)

        first = storage.upsert_wallet_balance(USER_ID, wallet.id, "ETH", Decimal("1.5"), Decimal("3000"))
        second = storage.upsert_wallet_balance(USER_ID, wallet.id, "ETH", Decimal("2"), None)

        rows = storage.get_wallet_balances(USER_ID, wallet.id)
        assert len(rows) == 1
        assert first.id == second.id
        assert rows[0].balance == Decimal("2")
        assert rows[0].balance_usd is None

    def test_detached_balance_keeps_one_row(self, db, users):
        storage = StorageService(db)
        first = storage.upsert_wallet_balance(USER_ID, None, "ETH", Decimal("1"))
        second = storage.upsert_wallet_balance(USER_ID, None, "ETH", Decimal("2"))

        assert second.id == first.id
        rows = storage.get_wallet_balances(USER_ID)
        assert [(r.wallet_id, r.balance) for r in rows] == [(None, Decimal("2"))]

    def test_detached_and_attached_rows_are_separate(self, db, users):
        storage = StorageService(db)
        wallet = _wallet(storage)
        storage.upsert_wallet_balance(USER_ID, None, "ETH", Decimal("1"))
        storage.upsert_wallet_balance(USER_ID, wallet.id, "ETH", Decimal("3"))
        storage.upsert_wallet_balance(USER_ID, None, "ETH", Decimal("4"))

        rows = {r.wallet_id: r.balance for r in storage.get_wallet_balances(USER_ID)}
        assert rows == {None: Decimal("4"), wallet.id: Decimal("3")}

    def test_balances_are_scoped_to_user(self, db, users):
        storage = StorageService(db)
        mine = _wallet(storage)
        theirs = _wallet(storage, user_id=OTHER_USER_ID)
        storage.upsert_wallet_balance(USER_ID, mine.id, "ETH", Decimal("1"))
        storage.upsert_wallet_balance(OTHER_USER_ID, theirs.id, "ETH", Decimal("5"))

        assert [b.balance for b in storage.get_wallet_balances(USER_ID)] == [Decimal("1")]
        assert storage.get_connected_wallet(USER_ID, theirs.id) is None


class TestDeleteWallet:
    def test_delete_removes_balances_and_sessions_keeps_trades(self, db, users):
        storage = StorageService(db)
        wallet = _wallet(storage)
        storage.upsert_wallet_balance(USER_ID, wallet.id, "ETH", Decimal("1"))
        storage.create_wallet_session(
            USER_ID, wallet.id, "tok-1", datetime.now(timezone.utc) + timedelta(days=1)
        )
        trade = storage.create_trading_record(
            USER_ID,
            wallet_id=wallet.id,
            pair="ETH/USDT",
            type="buy",
            amount=Decimal("1"),
            price=Decimal("2000"),
            total=Decimal("2000"),
        )

        storage.delete_connected_wallet(wallet.id)

        assert storage.get_connected_wallets(USER_ID) == []
        assert db.query(WalletBalance).count() == 0
        assert db.query(WalletSession).count() == 0
        db.expire_all()
        assert db.get(TradingHistory, trade.id).wallet_id is None


class TestTradingHistory:
    def test_newest_first_and_limited(self, db, users):
        storage = StorageService(db)
        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        for i in range(TRADING_HISTORY_LIMIT + 5):
            storage.create_trading_record(
                USER_ID,
                pair="BTC/USDT",
                type="buy",
                amount=Decimal(i + 1),
                price=Decimal("1"),
                total=Decimal(i + 1),
                created_at=start + timedelta(minutes=i),
            )

        trades = storage.get_trading_history(USER_ID)
        assert len(trades) == TRADING_HISTORY_LIMIT
        assert trades[0].amount == Decimal(TRADING_HISTORY_LIMIT + 5)
        assert trades[0].fee == Decimal("0")
        assert trades[0].status == "completed"


class TestMarketData:
    def test_upsert_and_read_every_symbol(self, db):
        storage = StorageService(db)
        storage.upsert_market_data("bitcoin", Decimal("60000"), Decimal("100"), Decimal("1.5"))
        storage.upsert_market_data("ethereum", Decimal("3000"), Decimal("50"), Decimal("-2"))
        storage.upsert_market_data("bitcoin", Decimal("61000"), Decimal("120"), Decimal("2"))

        rows = storage.get_market_data(["bitcoin", "ethereum"])
        assert [r.symbol for r in rows] == ["bitcoin", "ethereum"]
        assert rows[0].price == Decimal("61000")
        assert storage.get_market_data([]) == []
