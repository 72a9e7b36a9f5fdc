"""
User endpoints for API v1.

Sign‑up (only while logged out), lookup, renaming, password change and
account deletion.  Deleting an account also opts the user out of
matching and removes them from their communities.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from support_network_api.app.core.config import settings
from support_network_api.app.core.security import get_current_user, require_logged_out
from support_network_api.app.schemas.user import (
    PasswordUpdate,
    UserCredentials,
    UsernameUpdate,
    UserRead,
)
from support_network_api.app.services.community_service import CommunityService
from support_network_api.app.services.matching_service import MatchingService
from support_network_api.app.services.user_service import UserService


router = APIRouter()


@router.get("", response_model=List[UserRead])
async def list_users(prefix: Optional[str] = Query(None, description="Username prefix filter")) -> List[UserRead]:
    return await UserService.list_users(prefix)


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_logged_out)])
async def create_user(credentials: UserCredentials) -> dict:
    """Register a new user.  Callers must be logged out."""
    user = await UserService.create_user(credentials.username, credentials.password)
    return {"msg": "User created successfully!", "user": user}


@router.patch("/username", response_model=UserRead)
async def update_username(body: UsernameUpdate, current_user: dict = Depends(get_current_user)) -> UserRead:
    return await UserService.update_username(current_user["user_id"], body.username)


@router.patch("/password")
async def update_password(body: PasswordUpdate, current_user: dict = Depends(get_current_user)) -> dict:
    await UserService.update_password(current_user["user_id"], body.current_password, body.new_password)
    return {"msg": "Updated password successfully!"}


@router.delete("")
async def delete_user(response: Response, current_user: dict = Depends(get_current_user)) -> dict:
    """Delete the caller's account and end the session."""
    user_id = current_user["user_id"]
    if await MatchingService.check_if_matchable(user_id):
        await MatchingService.opt_out(user_id)
    for community in await CommunityService.get_user_communities(user_id):
        await CommunityService.leave(user_id, community)
    await UserService.delete_user(user_id)
    response.delete_cookie(settings.session_cookie_name)
    return {"msg": "User deleted!"}


@router.get("/{username}", response_model=UserRead)
async def get_user(username: str) -> UserRead:
    return await UserService.get_user_by_username(username)
