"""Latest quote per CoinGecko id, refreshed by upsert on symbol."""

from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from balance_tracker.models.base import Base, new_id


class MarketData(Base):
    __tablename__ = "market_data"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    symbol: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)

    price: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)
    volume_24h: Mapped[Decimal] = mapped_column(Numeric(20, 2), nullable=False)
    change_24h: Mapped[Decimal] = mapped_column(Numeric(10, 4), nullable=False)

    last_updated: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
