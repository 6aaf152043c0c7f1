"""Network table and alias resolution tests"""

import pytest

from balance_tracker.core.errors import UnsupportedNetworkError
from balance_tracker.core.networks import (
    NETWORKS,
    PRICE_IDS,
    TOKEN_CONTRACTS,
    get_network,
    resolve_network,
)
from balance_tracker.services.bootstrap_service import PREDEFINED_WALLETS
from balance_tracker.services.portfolio_service import DEFAULT_ADDRESSES


class TestResolveNetwork:
    """Every spelling used anywhere in the app maps to one canonical name"""

    @pytest.mark.parametrize(
        "label,expected",
        [
            ("ethereum", "ethereum"),
            ("ETH", "ethereum"),
            ("bsc", "bsc"),
            ("BNB", "bsc"),
            ("BNB Smart Chain", "bsc"),
            ("polygon", "polygon"),
            ("tron", "tron"),
            ("USDT_TRON", "tron"),
            ("BTC", "bitcoin"),
            ("  Bitcoin ", "bitcoin"),
        ],
    )
    def test_aliases(self, label, expected):
        assert resolve_network(label) == expected

    @pytest.mark.parametrize("label", ["", None, "solana", "eth2"])
    def test_unknown_network_raises(self, label):
        with pytest.raises(UnsupportedNetworkError):
            resolve_network(label)

    def test_default_labels_and_predefined_wallets_agree(self):
        """Portfolio address labels and predefined wallets describe the same networks"""
        from_labels = {(resolve_network(label), addr) for label, addr in DEFAULT_ADDRESSES}
        from_wallets = {(network, addr) for network, addr in PREDEFINED_WALLETS}
        assert from_labels == from_wallets


class TestNetworkTables:
    def test_fetchable_networks(self):
        assert get_network("bsc").family == "evm"
        assert get_network("tron").family == "tron"
        assert not get_network("bitcoin").fetchable

    def test_every_evm_network_has_explorer_and_tokens(self):
        for name, config in NETWORKS.items():
            if config.family == "evm":
                assert config.explorer_api_url
                assert TOKEN_CONTRACTS[name]

    def test_stablecoins_use_six_decimals(self):
        for tokens in TOKEN_CONTRACTS.values():
            for token in tokens:
                expected = 6 if token.symbol in ("USDT", "USDC") else 18
                assert token.decimals == expected

    def test_native_symbols_are_priced(self):
        for config in NETWORKS.values():
            assert config.native_symbol in PRICE_IDS
