"""Externally connected wallets and their connection sessions."""

from sqlalchemy import Boolean, DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from balance_tracker.models.base import Base, new_id

# metamask = browser extension, walletconnect = wallet protocol,
# coinbase = hosted wallet, manual = address typed in by the user
WALLET_TYPES = ("metamask", "walletconnect", "coinbase", "manual")

DEFAULT_PROJECT_ID = "0e0d74e5227e248cffdc16006c9e7e2f"


class ConnectedWallet(Base):
    __tablename__ = "connected_wallets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False, index=True)

    wallet_type: Mapped[str] = mapped_column(String(32), nullable=False)
    wallet_address: Mapped[str] = mapped_column(String(128), nullable=False)
    chain_id: Mapped[str] = mapped_column(String(32), nullable=False)
    network: Mapped[str] = mapped_column(String(32), nullable=False, comment="Canonical network name (ethereum, bsc, polygon, tron, bitcoin)")

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    last_connected: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    created_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )


class WalletSession(Base):
    __tablename__ = "wallet_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False)
    wallet_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("connected_wallets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    session_token: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    project_id: Mapped[str] = mapped_column(String(64), nullable=False, default=DEFAULT_PROJECT_ID)
    expires_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
