from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase field names; reads ORM rows directly."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class UserOut(CamelModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    is_admin: bool
    created_at: Optional[datetime] = None


class PortfolioOut(CamelModel):
    id: str
    user_id: str
    total_balance: Decimal
    btc_balance: Decimal
    eth_balance: Decimal
    bnb_balance: Decimal
    usdt_balance: Decimal
    updated_at: Optional[datetime] = None


class PortfolioUpdate(CamelModel):
    total_balance: Optional[Decimal] = Field(None, ge=0)
    btc_balance: Optional[Decimal] = Field(None, ge=0)
    eth_balance: Optional[Decimal] = Field(None, ge=0)
    bnb_balance: Optional[Decimal] = Field(None, ge=0)
    usdt_balance: Optional[Decimal] = Field(None, ge=0)


class WalletAddressOut(CamelModel):
    id: str
    network: str
    canonical_network: Optional[str] = None
    address: str
    is_active: bool


class TradingHistoryOut(CamelModel):
    id: str
    wallet_id: Optional[str] = None
    pair: str
    type: str
    amount: Decimal
    price: Decimal
    total: Decimal
    fee: Decimal
    tx_hash: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None


class TradingHistoryCreate(CamelModel):
    wallet_id: Optional[str] = None
    pair: str = Field(..., min_length=1, max_length=32)
    type: Literal["buy", "sell", "swap"]
    amount: Decimal = Field(..., gt=0)
    price: Decimal = Field(..., ge=0)
    total: Decimal = Field(..., ge=0)
    fee: Decimal = Field(Decimal("0"), ge=0)
    tx_hash: Optional[str] = None
    status: Literal["pending", "completed", "failed"] = "completed"


class MarketDataOut(CamelModel):
    symbol: str
    price: Decimal
    volume_24h: Decimal
    change_24h: Decimal
    last_updated: Optional[datetime] = None


class ConnectedWalletOut(CamelModel):
    id: str
    wallet_type: str
    wallet_address: str
    chain_id: str
    network: str
    is_active: bool
    last_connected: Optional[datetime] = None
    created_at: Optional[datetime] = None


class WalletConnectRequest(CamelModel):
    wallet_type: Literal["metamask", "walletconnect", "coinbase", "manual"]
    wallet_address: str = Field(..., min_length=1, max_length=128)
    chain_id: Optional[str] = None
    network: str = Field(..., min_length=1)


class WalletBalanceOut(CamelModel):
    id: str
    wallet_id: Optional[str] = None
    token_symbol: str
    token_address: Optional[str] = None
    balance: Decimal
    balance_usd: Optional[Decimal] = Field(None, alias="balanceUSD")
    last_updated: Optional[datetime] = None


class CallOutcomeOut(CamelModel):
    label: str
    status: Literal["success", "skipped", "failed"]
    detail: Optional[str] = None


class BalanceRefreshResponse(CamelModel):
    balances: list[WalletBalanceOut]
    outcomes: list[CallOutcomeOut]


class WalletSessionRequest(CamelModel):
    project_id: Optional[str] = None


class WalletSessionOut(CamelModel):
    id: str
    wallet_id: str
    session_token: str
    project_id: str
    expires_at: datetime
    is_active: bool


class HealthResponse(BaseModel):
    database: str
    balance_refresh_enabled: bool
