"""
Session endpoints for API v1.

Logging in issues a signed token, returned in the body for API clients
and set as the session cookie for browsers.  Logging out clears the
cookie; tokens are stateless and simply expire.
"""

from fastapi import APIRouter, Depends, Response

from support_network_api.app.core.config import settings
from support_network_api.app.core.security import (
    create_access_token,
    get_current_user,
    require_logged_out,
)
from support_network_api.app.schemas.user import SessionToken, UserCredentials, UserRead
from support_network_api.app.services.user_service import UserService


router = APIRouter()


@router.get("/session", response_model=UserRead)
async def get_session_user(current_user: dict = Depends(get_current_user)) -> UserRead:
    """Return the logged‑in user."""
    return await UserService.get_user_by_id(current_user["user_id"])


@router.post("/login", response_model=SessionToken, dependencies=[Depends(require_logged_out)])
async def log_in(credentials: UserCredentials, response: Response) -> SessionToken:
    """Authenticate with username and password and start a session."""
    user = await UserService.authenticate(credentials.username, credentials.password)
    token = create_access_token({"sub": str(user.id)})
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        samesite="lax",
    )
    return SessionToken(msg="Logged in!", access_token=token)


@router.post("/logout")
async def log_out(response: Response, current_user: dict = Depends(get_current_user)) -> dict:
    response.delete_cookie(settings.session_cookie_name)
    return {"msg": "Logged out!"}
