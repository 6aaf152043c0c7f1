"""Predefined wallet seeding tests"""

import pytest

from balance_tracker.services.bootstrap_service import PREDEFINED_WALLETS, WalletBootstrapper
from balance_tracker.services.storage import StorageService
from conftest import EVM_ADDRESS, USER_ID


class RecordingBalanceService:
    """Stands in for BalanceService; records refreshes and fails on demand"""

    def __init__(self, fail_networks=()):
        self.fail_networks = set(fail_networks)
        self.refreshed = []
        self.storage = None

    async def refresh_balances(self, wallet_id, user_id):
        wallet = self.storage.get_connected_wallet(user_id, wallet_id)
        self.refreshed.append(wallet.network)
        if wallet.network in self.fail_networks:
            raise RuntimeError(f"{wallet.network} explorer down")
        return []


def _bootstrapper(db, **kwargs):
    balances = RecordingBalanceService(**kwargs)
    balances.storage = StorageService(db)
    return WalletBootstrapper(db, balances), balances


class TestWalletBootstrapper:
    @pytest.mark.asyncio
    async def test_new_user_gets_predefined_wallets(self, db, users):
        bootstrapper, balances = _bootstrapper(db)
        created = await bootstrapper.ensure_default_wallets(USER_ID)

        assert [(w.network, w.wallet_address) for w in created] == list(PREDEFINED_WALLETS)
        assert {w.wallet_type for w in created} == {"manual"}
        assert {w.network: w.chain_id for w in created}["bsc"] == "56"
        # bitcoin is stored but never fetched
        assert balances.refreshed == ["ethereum", "bsc", "tron"]

    @pytest.mark.asyncio
    async def test_user_with_wallets_is_left_alone(self, db, users):
        StorageService(db).create_connected_wallet(USER_ID, "metamask", EVM_ADDRESS, "1", "ethereum")
        bootstrapper, balances = _bootstrapper(db)

        assert await bootstrapper.ensure_default_wallets(USER_ID) == []
        assert len(StorageService(db).get_connected_wallets(USER_ID)) == 1
        assert balances.refreshed == []

    @pytest.mark.asyncio
    async def test_refresh_failure_does_not_stop_seeding(self, db, users):
        bootstrapper, balances = _bootstrapper(db, fail_networks=("ethereum",))
        await bootstrapper.ensure_default_wallets(USER_ID)

        assert len(StorageService(db).get_connected_wallets(USER_ID)) == len(PREDEFINED_WALLETS)
        assert balances.refreshed == ["ethereum", "bsc", "tron"]

    @pytest.mark.asyncio
    async def test_second_call_is_a_no_op(self, db, users):
        bootstrapper, _ = _bootstrapper(db)
        await bootstrapper.ensure_default_wallets(USER_ID)
        assert await bootstrapper.ensure_default_wallets(USER_ID) == []
        assert len(StorageService(db).get_connected_wallets(USER_ID)) == len(PREDEFINED_WALLETS)
