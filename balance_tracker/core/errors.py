"""Domain errors raised by the services and translated to HTTP status codes by the routes."""


class BalanceTrackerError(Exception):
    """Base class for all domain errors."""


class WalletNotFoundError(BalanceTrackerError):
    def __init__(self, wallet_id: str):
        super().__init__(f"Wallet '{wallet_id}' not found")
        self.wallet_id = wallet_id


class UnsupportedNetworkError(BalanceTrackerError):
    def __init__(self, network: str | None):
        super().__init__(f"Unsupported network: {network}")
        self.network = network


class UpstreamUnavailableError(BalanceTrackerError):
    """A third-party API could not be reached or returned an unusable response."""
