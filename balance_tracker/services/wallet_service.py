"""Wallet connections: connect, reconnect, disconnect and connection sessions."""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from balance_tracker.core.errors import WalletNotFoundError
from balance_tracker.core.logging import get_logger
from balance_tracker.core.networks import get_network
from balance_tracker.models import ConnectedWallet, WalletSession
from balance_tracker.services.storage import StorageService

log = get_logger("wallet_service")

SESSION_TTL = timedelta(days=7)


class WalletService:
    def __init__(self, db: Session):
        self.storage = StorageService(db)

    def connect(
        self,
        user_id: str,
        wallet_type: str,
        wallet_address: str,
        network: str,
        chain_id: Optional[str] = None,
    ) -> ConnectedWallet:
        """Create a connection, or refresh the existing one for the same address and network.

        Raises ``UnsupportedNetworkError`` for unknown network names.
        """
        config = get_network(network)
        existing = self.storage.find_connected_wallet(user_id, wallet_address, config.name)
        if existing is not None:
            log.info(f"Reconnecting wallet {existing.id} ({config.name}) for user {user_id}")
            return self.storage.update_connected_wallet(
                existing.id,
                {
                    "wallet_type": wallet_type,
                    "chain_id": chain_id or existing.chain_id,
                    "is_active": True,
                    "last_connected": datetime.now(timezone.utc),
                },
            )

        wallet = self.storage.create_connected_wallet(
            user_id=user_id,
            wallet_type=wallet_type,
            wallet_address=wallet_address,
            chain_id=chain_id or config.chain_id,
            network=config.name,
        )
        log.info(f"Connected {wallet_type} wallet {wallet.id} on {config.name} for user {user_id}")
        return wallet

    def disconnect(self, user_id: str, wallet_id: str) -> None:
        if self.storage.get_connected_wallet(user_id, wallet_id) is None:
            raise WalletNotFoundError(wallet_id)
        self.storage.delete_connected_wallet(wallet_id)

    def open_session(self, user_id: str, wallet_id: str, project_id: Optional[str] = None) -> WalletSession:
        if self.storage.get_connected_wallet(user_id, wallet_id) is None:
            raise WalletNotFoundError(wallet_id)
        return self.storage.create_wallet_session(
            user_id=user_id,
            wallet_id=wallet_id,
            session_token=secrets.token_urlsafe(32),
            expires_at=datetime.now(timezone.utc) + SESSION_TTL,
            project_id=project_id,
        )

    def get_session(self, user_id: str, session_token: str) -> Optional[WalletSession]:
        """The owner's session for ``session_token``, or None once it is inactive or expired."""
        session = self.storage.get_wallet_session(session_token)
        if session is None or session.user_id != user_id or not session.is_active:
            return None
        expires_at = session.expires_at
        # SQLite hands back naive datetimes; they are stored as UTC
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if expires_at <= datetime.now(timezone.utc):
            return None
        return session
