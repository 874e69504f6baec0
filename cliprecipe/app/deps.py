# cliprecipe/app/deps.py
# Process-wide handles live on app.state (built once in create_app) and are
# exposed to routes as dependencies.
from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from supabase import Client

from cliprecipe.app.domain.errors import RecipePipelineError, UnauthenticatedError
from cliprecipe.app.services.recipe_pipeline import RecipePipeline


def http_error(error: RecipePipelineError) -> HTTPException:
    return HTTPException(
        status_code=error.http_status,
        detail={"code": error.code, "message": str(error)},
    )


def get_pipeline(request: Request) -> RecipePipeline:
    return request.app.state.pipeline


def get_supabase(request: Request) -> Optional[Client]:
    return getattr(request.app.state, "supabase", None)


auth_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    id: str
    email: str | None = None
    name: str | None = None


async def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    supa: Optional[Client] = Depends(get_supabase),
) -> CurrentUser:
    """
    Validate the Supabase access token sent as Authorization: Bearer <token>
    and return minimal user data.
    """
    if cred is None or cred.scheme.lower() != "bearer":
        raise http_error(UnauthenticatedError("Missing token"))

    if supa is None:
        raise http_error(UnauthenticatedError("Authentication backend is not configured"))

    try:
        res = supa.auth.get_user(cred.credentials)
        user = res.user if res else None
    except Exception as exc:
        raise http_error(UnauthenticatedError("Invalid/expired token")) from exc

    if not user:
        raise http_error(UnauthenticatedError("Invalid token"))

    name = None
    meta = getattr(user, "user_metadata", None) or {}
    if isinstance(meta, dict):
        name = meta.get("name")

    return CurrentUser(id=str(user.id), email=user.email, name=name)
