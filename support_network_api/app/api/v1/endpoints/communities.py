"""
Community endpoints for API v1.

Communities are composed from labels (see ``CommunityService``).
Members are returned as usernames, posts in the order they were
published to the community.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status

from support_network_api.app.core.security import get_current_user
from support_network_api.app.schemas.label import CommunityCreate, SymptomCreate
from support_network_api.app.schemas.post import PostRead
from support_network_api.app.services import responses
from support_network_api.app.services.community_service import CommunityService
from support_network_api.app.services.post_service import PostService
from support_network_api.app.services.user_service import UserService


router = APIRouter()


@router.get("", response_model=List[str])
async def get_user_communities(current_user: dict = Depends(get_current_user)) -> List[str]:
    """Communities the caller is a member of."""
    return await CommunityService.get_user_communities(current_user["user_id"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_community(body: CommunityCreate, current_user: dict = Depends(get_current_user)) -> dict:
    await CommunityService.create_community(current_user["user_id"], body.name)
    return {"msg": "Community created!", "community": body.name}


@router.get("/all", response_model=List[str])
async def list_communities() -> List[str]:
    return await CommunityService.list_communities()


@router.get("/search", response_model=List[str])
async def search_by_symptom(symptom: str = Query(..., min_length=1)) -> List[str]:
    """Communities whose common symptoms include ``symptom``."""
    return await CommunityService.search_by_symptom(symptom)


@router.get("/{name}/members", response_model=List[str])
async def get_community_members(name: str) -> List[str]:
    return await UserService.ids_to_usernames(await CommunityService.get_members(name))


@router.post("/{name}/members")
async def join_community(name: str, current_user: dict = Depends(get_current_user)) -> dict:
    await CommunityService.join(current_user["user_id"], name)
    return {"msg": "Joined community!"}


@router.delete("/{name}/members")
async def leave_community(name: str, current_user: dict = Depends(get_current_user)) -> dict:
    await CommunityService.leave(current_user["user_id"], name)
    return {"msg": "Left community!"}


@router.get("/{name}/posts", response_model=List[PostRead])
async def get_community_posts(name: str) -> List[PostRead]:
    post_ids = await CommunityService.get_post_ids(name)
    return await responses.posts(await PostService.get_posts_by_ids(post_ids))


@router.get("/{name}/symptoms", response_model=List[str])
async def get_common_symptoms(name: str) -> List[str]:
    return await CommunityService.get_common_symptoms(name)


@router.post("/{name}/symptoms", status_code=status.HTTP_201_CREATED)
async def add_common_symptom(
    name: str,
    body: SymptomCreate,
    current_user: dict = Depends(get_current_user),
) -> dict:
    await CommunityService.add_common_symptom(name, body.symptom)
    return {"msg": "Symptom added to community!"}
