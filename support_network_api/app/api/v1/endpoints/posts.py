"""
Post endpoints for API v1.

Anyone may read posts; creating requires a session and editing or
deleting requires being the post's author.  Comments on a post are
listed and added here; deleting a comment lives in ``comments``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from support_network_api.app.core.security import get_current_user
from support_network_api.app.schemas.comment import CommentCreate, CommentRead
from support_network_api.app.schemas.post import PostCreate, PostRead, PostUpdate
from support_network_api.app.services import responses
from support_network_api.app.services.comment_service import CommentService
from support_network_api.app.services.community_service import CommunityService
from support_network_api.app.services.labeling_service import community_posts
from support_network_api.app.services.post_service import PostService
from support_network_api.app.services.user_service import UserService


router = APIRouter()


@router.get("", response_model=List[PostRead])
async def get_posts(author: Optional[str] = Query(None, description="Only posts by this username")) -> List[PostRead]:
    if author:
        user = await UserService.get_user_by_username(author)
        records = await PostService.list_posts_by_author(user.id)
    else:
        records = await PostService.list_posts()
    return await responses.posts(records)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(body: PostCreate, current_user: dict = Depends(get_current_user)) -> dict:
    """Create a post, optionally inside a community."""
    record = await CommunityService.publish_post(
        current_user["user_id"], body.content, body.community, body.options
    )
    return {"msg": "Post successfully created!", "post": await responses.post(record)}


@router.patch("/{post_id}")
async def update_post(post_id: int, body: PostUpdate, current_user: dict = Depends(get_current_user)) -> dict:
    await PostService.assert_author_is_user(post_id, current_user["user_id"])
    record = await PostService.update_post(post_id, body.content, body.options)
    return {"msg": "Post successfully updated!", "post": await responses.post(record)}


@router.delete("/{post_id}")
async def delete_post(post_id: int, current_user: dict = Depends(get_current_user)) -> dict:
    """Delete a post together with its comments and community labels."""
    await PostService.assert_author_is_user(post_id, current_user["user_id"])
    for community in await community_posts.get_item_labels(post_id):
        await community_posts.remove_label(post_id, community)
    for comment in await CommentService.get_item_comments(post_id):
        await CommentService.delete_comment(comment.id)
    await PostService.delete_post(post_id)
    return {"msg": "Post deleted successfully!"}


@router.get("/{post_id}/comments", response_model=List[CommentRead])
async def get_post_comments(post_id: int) -> List[CommentRead]:
    await PostService.get_post(post_id)
    return await CommentService.get_item_comments(post_id)


@router.post("/{post_id}/comments", status_code=status.HTTP_201_CREATED)
async def add_comment(post_id: int, body: CommentCreate, current_user: dict = Depends(get_current_user)) -> dict:
    await PostService.get_post(post_id)
    comment = await CommentService.add_comment(post_id, current_user["user_id"], body.content)
    return {"msg": "Comment successfully added!", "comment": comment}
