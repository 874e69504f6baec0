# cliprecipe/app/routers/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from cliprecipe.app.deps import CurrentUser, get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=CurrentUser)
async def whoami(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Echo the caller resolved from the bearer token; clients use it to probe their session."""
    return user
