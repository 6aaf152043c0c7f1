"""Trading history routes."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from balance_tracker.api.deps import get_current_user_id, get_db
from balance_tracker.schemas.api import TradingHistoryCreate, TradingHistoryOut
from balance_tracker.services.storage import StorageService

router = APIRouter(prefix="/api/trading-history", tags=["trading"])


@router.get("", response_model=list[TradingHistoryOut])
def get_trading_history(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """The 50 most recent trades, newest first."""
    return [TradingHistoryOut.model_validate(t) for t in StorageService(db).get_trading_history(user_id)]


@router.post("", response_model=TradingHistoryOut, status_code=201)
def create_trading_record(
    body: TradingHistoryCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    storage = StorageService(db)
    if body.wallet_id and storage.get_connected_wallet(user_id, body.wallet_id) is None:
        raise HTTPException(status_code=404, detail=f"Wallet '{body.wallet_id}' not found")
    trade = storage.create_trading_record(user_id, **body.model_dump())
    return TradingHistoryOut.model_validate(trade)
