"""Wallet routes - connections, cached balances and connection sessions."""

import httpx
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from balance_tracker.api.deps import get_current_user_id, get_db, get_http_client
from balance_tracker.core.errors import UnsupportedNetworkError, WalletNotFoundError
from balance_tracker.core.logging import get_logger
from balance_tracker.schemas.api import (
    BalanceRefreshResponse,
    CallOutcomeOut,
    ConnectedWalletOut,
    WalletBalanceOut,
    WalletConnectRequest,
    WalletSessionOut,
    WalletSessionRequest,
)
from balance_tracker.services.balance_service import BalanceService
from balance_tracker.services.bootstrap_service import WalletBootstrapper
from balance_tracker.services.storage import StorageService
from balance_tracker.services.wallet_service import WalletService

router = APIRouter(prefix="/api/wallets", tags=["wallets"])
log = get_logger("wallet_routes")


@router.get("/connected", response_model=list[ConnectedWalletOut])
async def get_connected_wallets(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """List the user's wallets, seeding the predefined ones for a user that has none."""
    bootstrapper = WalletBootstrapper(db, BalanceService(db, client=client))
    await bootstrapper.ensure_default_wallets(user_id)
    return [ConnectedWalletOut.model_validate(w) for w in StorageService(db).get_connected_wallets(user_id)]


@router.post("/connect", response_model=ConnectedWalletOut)
def connect_wallet(
    body: WalletConnectRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        wallet = WalletService(db).connect(
            user_id=user_id,
            wallet_type=body.wallet_type,
            wallet_address=body.wallet_address.strip(),
            network=body.network,
            chain_id=body.chain_id,
        )
    except UnsupportedNetworkError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return ConnectedWalletOut.model_validate(wallet)


@router.delete("/{wallet_id}/disconnect")
def disconnect_wallet(
    wallet_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        WalletService(db).disconnect(user_id, wallet_id)
    except WalletNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return {"success": True}


@router.post("/{wallet_id}/balances/refresh", response_model=BalanceRefreshResponse)
async def refresh_wallet_balances(
    wallet_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """
    Fetch on-chain balances for one wallet, price them and store them.

    Upstream failures do not fail the request: they are reported per call in
    ``outcomes`` and the balances that could be fetched are still returned.
    """
    try:
        result = await BalanceService(db, client=client).refresh_with_report(wallet_id, user_id)
    except WalletNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except UnsupportedNetworkError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return BalanceRefreshResponse(
        balances=[WalletBalanceOut.model_validate(b) for b in result.balances],
        outcomes=[CallOutcomeOut.model_validate(o) for o in result.outcomes],
    )


@router.get("/balances", response_model=list[WalletBalanceOut])
def get_all_balances(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return [WalletBalanceOut.model_validate(b) for b in StorageService(db).get_wallet_balances(user_id)]


@router.get("/{wallet_id}/balances", response_model=list[WalletBalanceOut])
def get_wallet_balances(
    wallet_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    storage = StorageService(db)
    if storage.get_connected_wallet(user_id, wallet_id) is None:
        raise HTTPException(status_code=404, detail=f"Wallet '{wallet_id}' not found")
    return [WalletBalanceOut.model_validate(b) for b in storage.get_wallet_balances(user_id, wallet_id)]


@router.post("/{wallet_id}/sessions", response_model=WalletSessionOut, status_code=201)
def open_wallet_session(
    wallet_id: str,
    body: WalletSessionRequest | None = None,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    project_id = body.project_id if body else None
    try:
        session = WalletService(db).open_session(user_id, wallet_id, project_id=project_id)
    except WalletNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    log.info(f"Opened session for wallet {wallet_id}")
    return WalletSessionOut.model_validate(session)


@router.get("/sessions/{session_token}", response_model=WalletSessionOut)
def get_wallet_session(
    session_token: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    session = WalletService(db).get_session(user_id, session_token)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return WalletSessionOut.model_validate(session)
