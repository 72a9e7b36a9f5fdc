"""
Friend endpoints for API v1.

Users are addressed by username in paths; the handlers translate
usernames to ids before calling ``FriendService``.
"""

from typing import List

from fastapi import APIRouter, Depends

from support_network_api.app.core.security import get_current_user
from support_network_api.app.schemas.friend import FriendRequestRead
from support_network_api.app.services import responses
from support_network_api.app.services.friend_service import FriendService
from support_network_api.app.services.user_service import UserService


router = APIRouter()


async def _user_id(username: str) -> int:
    return (await UserService.get_user_by_username(username)).id


@router.get("/friends", response_model=List[str])
async def get_friends(current_user: dict = Depends(get_current_user)) -> List[str]:
    friends = await FriendService.get_friends(current_user["user_id"])
    return await UserService.ids_to_usernames(friends)


@router.delete("/friends/{friend}")
async def remove_friend(friend: str, current_user: dict = Depends(get_current_user)) -> dict:
    await FriendService.remove_friend(current_user["user_id"], await _user_id(friend))
    return {"msg": "Unfriended!"}


@router.get("/friend/requests", response_model=List[FriendRequestRead])
async def get_requests(current_user: dict = Depends(get_current_user)) -> List[FriendRequestRead]:
    return await responses.friend_requests(await FriendService.get_requests(current_user["user_id"]))


@router.post("/friend/requests/{to}")
async def send_friend_request(to: str, current_user: dict = Depends(get_current_user)) -> dict:
    await FriendService.send_request(current_user["user_id"], await _user_id(to))
    return {"msg": "Sent request!"}


@router.delete("/friend/requests/{to}")
async def remove_friend_request(to: str, current_user: dict = Depends(get_current_user)) -> dict:
    await FriendService.remove_request(current_user["user_id"], await _user_id(to))
    return {"msg": "Removed request!"}


@router.put("/friend/accept/{sender}")
async def accept_friend_request(sender: str, current_user: dict = Depends(get_current_user)) -> dict:
    await FriendService.accept_request(await _user_id(sender), current_user["user_id"])
    return {"msg": "Accepted request!"}


@router.put("/friend/reject/{sender}")
async def reject_friend_request(sender: str, current_user: dict = Depends(get_current_user)) -> dict:
    await FriendService.reject_request(await _user_id(sender), current_user["user_id"])
    return {"msg": "Rejected request!"}
