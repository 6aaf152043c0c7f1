"""Seeds the predefined wallet connections for users that have none."""

from __future__ import annotations

from typing import List, Tuple

from sqlalchemy.orm import Session

from balance_tracker.core.logging import get_logger
from balance_tracker.core.networks import NETWORKS
from balance_tracker.models import ConnectedWallet
from balance_tracker.services.balance_service import BalanceService
from balance_tracker.services.storage import StorageService

log = get_logger("bootstrap_service")

# (network, address) pairs created for every new user, all as manual wallets
PREDEFINED_WALLETS: Tuple[Tuple[str, str], ...] = (
    ("ethereum", "0xB36EDa1ffC696FFba07D4Be5cd249FE5E0118130"),
    ("bitcoin", "bc1qv4fffwt8ux3k33n2dms5cdvuh6suc0gtfevxzu"),
    ("bsc", "0xB36EDa1ffC696FFba07D4Be5cd249FE5E0118130"),
    ("tron", "TSt7yoNwGYRbtMMfkSAHE6dPs1cd9rxcco"),
)


class WalletBootstrapper:
    def __init__(self, db: Session, balance_service: BalanceService):
        self.db = db
        self.storage = StorageService(db)
        self.balance_service = balance_service

    async def ensure_default_wallets(self, user_id: str) -> List[ConnectedWallet]:
        """Create the predefined wallets if, and only if, the user has no wallet at all.

        Each wallet is created and refreshed on its own: a failure is logged
        and the next wallet is still attempted. Nothing is rolled back.
        """
        if self.storage.get_connected_wallets(user_id):
            return []

        log.info(f"Seeding {len(PREDEFINED_WALLETS)} predefined wallets for user {user_id}")
        created: List[ConnectedWallet] = []
        for network, address in PREDEFINED_WALLETS:
            config = NETWORKS[network]
            try:
                wallet = self.storage.create_connected_wallet(
                    user_id=user_id,
                    wallet_type="manual",
                    wallet_address=address,
                    chain_id=config.chain_id,
                    network=network,
                )
                created.append(wallet)
                if config.fetchable:
                    await self.balance_service.refresh_balances(wallet.id, user_id)
            except Exception as exc:  # noqa: BLE001
                self.db.rollback()
                log.error(f"Failed to initialize {network} wallet {address} for user {user_id}: {exc}")

        return created
