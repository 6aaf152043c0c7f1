"""Cached per-token balances for connected wallets."""

from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String, func, text
from sqlalchemy.orm import Mapped, mapped_column

from balance_tracker.models.base import Base, new_id


class WalletBalance(Base):
    """Best-effort display balance of one token in one wallet.

    There is at most one row per (user_id, wallet_id, token_symbol); the unique
    indexes below (one for attached rows, one for detached rows with no
    wallet) back the atomic upsert done by the storage layer.
    """

    __tablename__ = "wallet_balances"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    wallet_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("connected_wallets.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    token_symbol: Mapped[str] = mapped_column(String(20), nullable=False)
    token_address: Mapped[str | None] = mapped_column(String(128), nullable=True, comment="Contract address; NULL for the native coin")

    balance: Mapped[Decimal] = mapped_column(Numeric(30, 18), nullable=False)
    balance_usd: Mapped[Decimal | None] = mapped_column(Numeric(20, 8), nullable=True)

    last_updated: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ux_wallet_balances_user_wallet_token", "user_id", "wallet_id", "token_symbol", unique=True),
        # NULLs are distinct in the index above; detached rows get their own partial index
        Index(
            "ux_wallet_balances_user_token_detached",
            "user_id",
            "token_symbol",
            unique=True,
            sqlite_where=text("wallet_id IS NULL"),
            postgresql_where=text("wallet_id IS NULL"),
        ),
    )
