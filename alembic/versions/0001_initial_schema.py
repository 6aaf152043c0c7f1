"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-12 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamp(name: str, **kwargs) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True, **kwargs)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("first_name", sa.String(length=255), nullable=True),
        sa.Column("last_name", sa.String(length=255), nullable=True),
        sa.Column("profile_image_url", sa.String(length=1024), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "portfolios",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("total_balance", sa.Numeric(20, 8), nullable=False, server_default="0"),
        sa.Column("btc_balance", sa.Numeric(20, 8), nullable=False, server_default="0"),
        sa.Column("eth_balance", sa.Numeric(20, 8), nullable=False, server_default="0"),
        sa.Column("bnb_balance", sa.Numeric(20, 8), nullable=False, server_default="0"),
        sa.Column("usdt_balance", sa.Numeric(20, 8), nullable=False, server_default="0"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_portfolios_user_id", "portfolios", ["user_id"], unique=True)

    op.create_table(
        "wallet_addresses",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("network", sa.String(length=20), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_wallet_addresses_user_id", "wallet_addresses", ["user_id"])

    op.create_table(
        "connected_wallets",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("wallet_type", sa.String(length=32), nullable=False),
        sa.Column("wallet_address", sa.String(length=128), nullable=False),
        sa.Column("chain_id", sa.String(length=32), nullable=False),
        sa.Column("network", sa.String(length=32), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _timestamp("last_connected"),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_connected_wallets_user_id", "connected_wallets", ["user_id"])

    op.create_table(
        "wallet_sessions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "wallet_id",
            sa.String(length=36),
            sa.ForeignKey("connected_wallets.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("session_token", sa.String(length=128), nullable=False),
        sa.Column("project_id", sa.String(length=64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("session_token"),
    )
    op.create_index("ix_wallet_sessions_wallet_id", "wallet_sessions", ["wallet_id"])

    op.create_table(
        "wallet_balances",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "wallet_id",
            sa.String(length=36),
            sa.ForeignKey("connected_wallets.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("token_symbol", sa.String(length=20), nullable=False),
        sa.Column("token_address", sa.String(length=128), nullable=True),
        sa.Column("balance", sa.Numeric(30, 18), nullable=False),
        sa.Column("balance_usd", sa.Numeric(20, 8), nullable=True),
        _timestamp("last_updated"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_wallet_balances_user_id", "wallet_balances", ["user_id"])
    op.create_index("ix_wallet_balances_wallet_id", "wallet_balances", ["wallet_id"])

    op.create_table(
        "trading_history",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "wallet_id",
            sa.String(length=36),
            sa.ForeignKey("connected_wallets.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("pair", sa.String(length=32), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("amount", sa.Numeric(20, 8), nullable=False),
        sa.Column("price", sa.Numeric(20, 8), nullable=False),
        sa.Column("total", sa.Numeric(20, 8), nullable=False),
        sa.Column("fee", sa.Numeric(20, 8), nullable=False, server_default="0"),
        sa.Column("tx_hash", sa.String(length=128), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="completed"),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_trading_history_user_id", "trading_history", ["user_id"])
    op.create_index("ix_trading_history_created_at", "trading_history", ["created_at"])

    op.create_table(
        "market_data",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("symbol", sa.String(length=64), nullable=False),
        sa.Column("price", sa.Numeric(20, 8), nullable=False),
        sa.Column("volume_24h", sa.Numeric(20, 2), nullable=False),
        sa.Column("change_24h", sa.Numeric(10, 4), nullable=False),
        _timestamp("last_updated"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_market_data_symbol", "market_data", ["symbol"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_market_data_symbol", table_name="market_data")
    op.drop_table("market_data")
    op.drop_index("ix_trading_history_created_at", table_name="trading_history")
    op.drop_index("ix_trading_history_user_id", table_name="trading_history")
    op.drop_table("trading_history")
    op.drop_index("ix_wallet_balances_wallet_id", table_name="wallet_balances")
    op.drop_index("ix_wallet_balances_user_id", table_name="wallet_balances")
    op.drop_table("wallet_balances")
    op.drop_index("ix_wallet_sessions_wallet_id", table_name="wallet_sessions")
    op.drop_table("wallet_sessions")
    op.drop_index("ix_connected_wallets_user_id", table_name="connected_wallets")
    op.drop_table("connected_wallets")
    op.drop_index("ix_wallet_addresses_user_id", table_name="wallet_addresses")
    op.drop_table("wallet_addresses")
    op.drop_index("ix_portfolios_user_id", table_name="portfolios")
    op.drop_table("portfolios")
    op.drop_table("users")
