"""one wallet_balances row per (user, wallet, token)

Revision ID: 0002_unique_wallet_balance
Revises: 0001_initial_schema
Create Date: 2026-10-14 11:20:00.000000
"""

from __future__ import annotations

from alembic import op

# revision identifiers, used by Alembic.
revision = "0002_unique_wallet_balance"
down_revision = "0001_initial_schema"
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Keep only the newest row of any duplicated (user, wallet, token) triple
    op.execute(
        """
        DELETE FROM wallet_balances
        WHERE id IN (
            SELECT id FROM (
                SELECT id,
                       ROW_NUMBER() OVER (
                           PARTITION BY user_id, wallet_id, token_symbol
                           ORDER BY last_updated DESC
                       ) AS rn
                FROM wallet_balances
            ) ranked
            WHERE ranked.rn > 1
        )
        """
    )
    op.create_index(
        "ux_wallet_balances_user_wallet_token",
        "wallet_balances",
        ["user_id", "wallet_id", "token_symbol"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index("ux_wallet_balances_user_wallet_token", table_name="wallet_balances")
