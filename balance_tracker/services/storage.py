"""Storage Service - all reads and writes for users, wallets, balances, trades and quotes."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from balance_tracker.core.logging import get_logger
from balance_tracker.models import (
    ConnectedWallet,
    MarketData,
    Portfolio,
    TradingHistory,
    User,
    WalletAddress,
    WalletBalance,
    WalletSession,
)
from balance_tracker.models.base import new_id

log = get_logger("storage")

TRADING_HISTORY_LIMIT = 50


class StorageService:
    """Thin gateway over the ORM; every write commits immediately."""

    def __init__(self, db: Session):
        self.db = db

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    def _insert(self, model):
        """Dialect-specific INSERT so ``on_conflict_do_update`` is available."""
        if self.db.get_bind().dialect.name == "sqlite":
            return sqlite_insert(model)
        return pg_insert(model)

    def _upsert_returning(self, stmt, model):
        obj = self.db.scalars(
            stmt.returning(model),
            execution_options={"populate_existing": True},
        ).one()
        self.db.commit()
        return obj

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------
    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def list_users(self) -> List[User]:
        return list(self.db.execute(select(User).order_by(User.created_at)).scalars().all())

    def upsert_user(self, user_id: str, **fields: Any) -> User:
        values = {"id": user_id, **fields}
        stmt = self._insert(User).values([values])
        updates = {key: getattr(stmt.excluded, key) for key in fields}
        updates["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(index_elements=[User.id], set_=updates)
        return self._upsert_returning(stmt, User)

    # -------------------------------------------------------------------------
    # Portfolios & wallet addresses
    # -------------------------------------------------------------------------
    def get_portfolio(self, user_id: str) -> Optional[Portfolio]:
        stmt = select(Portfolio).where(Portfolio.user_id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def create_portfolio(self, user_id: str, **balances: Decimal) -> Portfolio:
        portfolio = Portfolio(user_id=user_id, **balances)
        self.db.add(portfolio)
        self.db.commit()
        self.db.refresh(portfolio)
        return portfolio

    def update_portfolio(self, user_id: str, updates: Dict[str, Any]) -> Optional[Portfolio]:
        portfolio = self.get_portfolio(user_id)
        if portfolio is None:
            return None
        for key, value in updates.items():
            setattr(portfolio, key, value)
        portfolio.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(portfolio)
        return portfolio

    def get_wallet_addresses(self, user_id: str) -> List[WalletAddress]:
        stmt = select(WalletAddress).where(WalletAddress.user_id == user_id).order_by(WalletAddress.network)
        return list(self.db.execute(stmt).scalars().all())

    def create_wallet_address(self, user_id: str, network: str, address: str) -> WalletAddress:
        row = WalletAddress(user_id=user_id, network=network, address=address, is_active=True)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    # -------------------------------------------------------------------------
    # Connected wallets
    # -------------------------------------------------------------------------
    def get_connected_wallets(self, user_id: str) -> List[ConnectedWallet]:
        stmt = (
            select(ConnectedWallet)
            .where(ConnectedWallet.user_id == user_id)
            .order_by(ConnectedWallet.last_connected.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_connected_wallet(self, user_id: str, wallet_id: str) -> Optional[ConnectedWallet]:
        """Ownership-scoped lookup: a wallet id of another user never matches."""
        stmt = select(ConnectedWallet).where(
            ConnectedWallet.id == wallet_id,
            ConnectedWallet.user_id == user_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def find_connected_wallet(self, user_id: str, wallet_address: str, network: str) -> Optional[ConnectedWallet]:
        stmt = select(ConnectedWallet).where(
            ConnectedWallet.user_id == user_id,
            ConnectedWallet.wallet_address == wallet_address,
            ConnectedWallet.network == network,
        )
        return self.db.execute(stmt).scalars().first()

    def get_active_wallets(self, user_id: Optional[str] = None) -> List[ConnectedWallet]:
        stmt = select(ConnectedWallet).where(ConnectedWallet.is_active.is_(True))
        if user_id:
            stmt = stmt.where(ConnectedWallet.user_id == user_id)
        return list(self.db.execute(stmt.order_by(ConnectedWallet.user_id)).scalars().all())

    def create_connected_wallet(
        self,
        user_id: str,
        wallet_type: str,
        wallet_address: str,
        chain_id: str,
        network: str,
    ) -> ConnectedWallet:
        wallet = ConnectedWallet(
            user_id=user_id,
            wallet_type=wallet_type,
            wallet_address=wallet_address,
            chain_id=chain_id,
            network=network,
            is_active=True,
            last_connected=datetime.now(timezone.utc),
        )
        self.db.add(wallet)
        self.db.commit()
        self.db.refresh(wallet)
        return wallet

    def update_connected_wallet(self, wallet_id: str, updates: Dict[str, Any]) -> Optional[ConnectedWallet]:
        wallet = self.db.get(ConnectedWallet, wallet_id)
        if wallet is None:
            return None
        for key, value in updates.items():
            setattr(wallet, key, value)
        self.db.commit()
        self.db.refresh(wallet)
        return wallet

    def delete_connected_wallet(self, wallet_id: str) -> None:
        """Delete a wallet together with its balances and sessions.

        Trades keep their row; the foreign key sets their wallet_id to NULL.
        """
        self.db.execute(delete(WalletBalance).where(WalletBalance.wallet_id == wallet_id))
        self.db.execute(delete(WalletSession).where(WalletSession.wallet_id == wallet_id))
        self.db.execute(
            update(TradingHistory).where(TradingHistory.wallet_id == wallet_id).values(wallet_id=None)
        )
        self.db.execute(delete(ConnectedWallet).where(ConnectedWallet.id == wallet_id))
        self.db.commit()
        log.info(f"Deleted wallet {wallet_id} and its balances")

    # -------------------------------------------------------------------------
    # Wallet balances
    # -------------------------------------------------------------------------
    def get_wallet_balances(self, user_id: str, wallet_id: Optional[str] = None) -> List[WalletBalance]:
        stmt = select(WalletBalance).where(WalletBalance.user_id == user_id)
        if wallet_id:
            stmt = stmt.where(WalletBalance.wallet_id == wallet_id)
        stmt = stmt.order_by(WalletBalance.last_updated.desc(), WalletBalance.token_symbol)
        return list(self.db.execute(stmt).scalars().all())

    def upsert_wallet_balance(
        self,
        user_id: str,
        wallet_id: Optional[str],
        token_symbol: str,
        balance: Decimal,
        balance_usd: Optional[Decimal] = None,
        token_address: Optional[str] = None,
    ) -> WalletBalance:
        """Insert or update the single row for (user, wallet, token) in one statement."""
        stmt = self._insert(WalletBalance).values(
            [
                {
                    "id": new_id(),
                    "user_id": user_id,
                    "wallet_id": wallet_id,
                    "token_symbol": token_symbol,
                    "token_address": token_address,
                    "balance": balance,
                    "balance_usd": balance_usd,
                }
            ]
        )
        if wallet_id is None:
            target = {
                "index_elements": [WalletBalance.user_id, WalletBalance.token_symbol],
                "index_where": WalletBalance.wallet_id.is_(None),
            }
        else:
            target = {"index_elements": [WalletBalance.user_id, WalletBalance.wallet_id, WalletBalance.token_symbol]}
        stmt = stmt.on_conflict_do_update(
            **target,
            set_={
                "token_address": stmt.excluded.token_address,
                "balance": stmt.excluded.balance,
                "balance_usd": stmt.excluded.balance_usd,
                "last_updated": func.now(),
            },
        )
        return self._upsert_returning(stmt, WalletBalance)

    def delete_wallet_balances(self, wallet_id: str) -> int:
        result = self.db.execute(delete(WalletBalance).where(WalletBalance.wallet_id == wallet_id))
        self.db.commit()
        return result.rowcount or 0

    # -------------------------------------------------------------------------
    # Wallet sessions
    # -------------------------------------------------------------------------
    def create_wallet_session(
        self,
        user_id: str,
        wallet_id: str,
        session_token: str,
        expires_at: datetime,
        project_id: Optional[str] = None,
    ) -> WalletSession:
        session = WalletSession(
            user_id=user_id,
            wallet_id=wallet_id,
            session_token=session_token,
            expires_at=expires_at,
            is_active=True,
        )
        if project_id:
            session.project_id = project_id
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def get_wallet_session(self, session_token: str) -> Optional[WalletSession]:
        stmt = select(WalletSession).where(WalletSession.session_token == session_token)
        return self.db.execute(stmt).scalar_one_or_none()

    def delete_wallet_session(self, wallet_id: str) -> None:
        self.db.execute(delete(WalletSession).where(WalletSession.wallet_id == wallet_id))
        self.db.commit()

    # -------------------------------------------------------------------------
    # Trading history
    # -------------------------------------------------------------------------
    def get_trading_history(self, user_id: str) -> List[TradingHistory]:
        stmt = (
            select(TradingHistory)
            .where(TradingHistory.user_id == user_id)
            .order_by(TradingHistory.created_at.desc())
            .limit(TRADING_HISTORY_LIMIT)
        )
        return list(self.db.execute(stmt).scalars().all())

    def create_trading_record(self, user_id: str, **fields: Any) -> TradingHistory:
        trade = TradingHistory(user_id=user_id, **fields)
        self.db.add(trade)
        self.db.commit()
        self.db.refresh(trade)
        return trade

    # -------------------------------------------------------------------------
    # Market data
    # -------------------------------------------------------------------------
    def get_market_data(self, symbols: Iterable[str]) -> List[MarketData]:
        wanted = list(symbols)
        if not wanted:
            return []
        stmt = select(MarketData).where(MarketData.symbol.in_(wanted)).order_by(MarketData.symbol)
        return list(self.db.execute(stmt).scalars().all())

    def upsert_market_data(
        self,
        symbol: str,
        price: Decimal,
        volume_24h: Decimal,
        change_24h: Decimal,
    ) -> MarketData:
        stmt = self._insert(MarketData).values(
            [
                {
                    "id": new_id(),
                    "symbol": symbol,
                    "price": price,
                    "volume_24h": volume_24h,
                    "change_24h": change_24h,
                }
            ]
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[MarketData.symbol],
            set_={
                "price": stmt.excluded.price,
                "volume_24h": stmt.excluded.volume_24h,
                "change_24h": stmt.excluded.change_24h,
                "last_updated": func.now(),
            },
        )
        return self._upsert_returning(stmt, MarketData)
