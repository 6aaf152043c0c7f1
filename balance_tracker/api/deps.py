"""API dependencies"""

from typing import AsyncGenerator, Generator, Optional

import httpx
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from balance_tracker.core.config import settings
from balance_tracker.core.db import SessionLocal
from balance_tracker.models import User
from balance_tracker.services.storage import StorageService


def get_db() -> Generator[Session, None, None]:
    """Database dependency"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


async def get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """One outbound HTTP client per request, shared by every fetcher it uses."""
    async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
        yield client


def get_current_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    x_user_email: Optional[str] = Header(None, alias="X-User-Email"),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the caller from the auth proxy headers and make sure the user row exists."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Unauthorized")

    fields = {}
    if x_user_email:
        email = x_user_email.strip().lower()
        fields = {"email": email, "is_admin": email in settings.admin_emails}
    return StorageService(db).upsert_user(x_user_id.strip(), **fields)


def get_current_user_id(user: User = Depends(get_current_user)) -> str:
    return user.id
