"""Portfolio routes - manual portfolio totals and deposit addresses."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from balance_tracker.api.deps import get_current_user_id, get_db
from balance_tracker.core.errors import UnsupportedNetworkError
from balance_tracker.core.networks import resolve_network
from balance_tracker.schemas.api import PortfolioOut, PortfolioUpdate, WalletAddressOut
from balance_tracker.services.portfolio_service import PortfolioService
from balance_tracker.services.storage import StorageService

router = APIRouter(prefix="/api", tags=["portfolio"])


def _canonical(label: str) -> Optional[str]:
    try:
        return resolve_network(label)
    except UnsupportedNetworkError:
        return None


@router.get("/portfolio", response_model=PortfolioOut)
def get_portfolio(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Get the user's portfolio, creating it with the default addresses on first access."""
    return PortfolioOut.model_validate(PortfolioService(db).get_or_create(user_id))


@router.patch("/portfolio", response_model=PortfolioOut)
def update_portfolio(
    body: PortfolioUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    portfolio = PortfolioService(db).update(user_id, body.model_dump(exclude_unset=True))
    return PortfolioOut.model_validate(portfolio)


@router.get("/wallet-addresses", response_model=list[WalletAddressOut])
def get_wallet_addresses(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    PortfolioService(db).get_or_create(user_id)
    rows = StorageService(db).get_wallet_addresses(user_id)
    return [
        WalletAddressOut(
            id=r.id,
            network=r.network,
            canonical_network=_canonical(r.network),
            address=r.address,
            is_active=r.is_active,
        )
        for r in rows
    ]
