"""Group endpoints for API v1."""

from typing import List

from fastapi import APIRouter, Depends, status

from support_network_api.app.core.security import get_current_user
from support_network_api.app.schemas.group import GroupCreate, GroupRead
from support_network_api.app.services.group_service import GroupService


router = APIRouter()


@router.get("", response_model=List[GroupRead])
async def list_groups() -> List[GroupRead]:
    return await GroupService.list_groups()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_group(body: GroupCreate, current_user: dict = Depends(get_current_user)) -> dict:
    group = await GroupService.create_group(body.name)
    return {"msg": "Group successfully created!", "group": group}


@router.get("/mine", response_model=List[str])
async def get_my_groups(current_user: dict = Depends(get_current_user)) -> List[str]:
    return await GroupService.get_groups_for_user(current_user["user_id"])


@router.get("/{name}/members", response_model=List[int])
async def get_group_members(name: str) -> List[int]:
    return await GroupService.get_members(name)


@router.post("/{name}/members")
async def join_group(name: str, current_user: dict = Depends(get_current_user)) -> dict:
    await GroupService.join_group(current_user["user_id"], name)
    return {"msg": "Joined group!"}


@router.delete("/{name}/members")
async def leave_group(name: str, current_user: dict = Depends(get_current_user)) -> dict:
    await GroupService.leave_group(current_user["user_id"], name)
    return {"msg": "Left group!"}
