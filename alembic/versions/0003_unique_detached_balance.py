"""one detached wallet_balances row per (user, token)

Revision ID: 0003_unique_detached_balance
Revises: 0002_unique_wallet_balance
Create Date: 2026-10-19 10:05:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0003_unique_detached_balance"
down_revision = "0002_unique_wallet_balance"
branch_labels = None
depends_on = None


def upgrade() -> None:
    # NULL wallet_ids never collide in ux_wallet_balances_user_wallet_token
    op.execute(
        """
        DELETE FROM wallet_balances
        WHERE id IN (
            SELECT id FROM (
                SELECT id,
                       ROW_NUMBER() OVER (
                           PARTITION BY user_id, token_symbol
                           ORDER BY last_updated DESC
                       ) AS rn
                FROM wallet_balances
                WHERE wallet_id IS NULL
            ) ranked
            WHERE ranked.rn > 1
        )
        """
    )
    op.create_index(
        "ux_wallet_balances_user_token_detached",
        "wallet_balances",
        ["user_id", "token_symbol"],
        unique=True,
        sqlite_where=sa.text("wallet_id IS NULL"),
        postgresql_where=sa.text("wallet_id IS NULL"),
    )


def downgrade() -> None:
    op.drop_index("ux_wallet_balances_user_token_detached", table_name="wallet_balances")
