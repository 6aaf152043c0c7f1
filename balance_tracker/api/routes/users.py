"""User routes - current user and the admin user listing."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from balance_tracker.api.deps import get_current_user, get_db
from balance_tracker.models import User
from balance_tracker.schemas.api import UserOut
from balance_tracker.services.storage import StorageService

router = APIRouter(prefix="/api", tags=["users"])


@router.get("/auth/user", response_model=UserOut)
def get_auth_user(user: User = Depends(get_current_user)):
    return UserOut.model_validate(user)


@router.get("/admin/users", response_model=list[UserOut])
def list_users(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """List every user. Admins only."""
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return [UserOut.model_validate(u) for u in StorageService(db).list_users()]
