"""
Comment endpoints for API v1.

Deletion is authorised by the configured comment delete policy
(``COMMENT_DELETE_POLICY``): ``author``, ``post_author`` or ``anyone``.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from support_network_api.app.core.config import settings
from support_network_api.app.core.errors import NotFoundError
from support_network_api.app.core.security import get_current_user
from support_network_api.app.services.comment_service import CommentService, assert_can_delete
from support_network_api.app.services.post_service import PostService


router = APIRouter()


@router.delete("/{comment_id}")
async def delete_comment(comment_id: int, current_user: dict = Depends(get_current_user)) -> dict:
    comment = await CommentService.get_comment(comment_id)
    parent_author: Optional[int] = None
    if settings.comment_delete_policy == "post_author":
        try:
            parent_author = (await PostService.get_post(comment.parent_id))["author_id"]
        except NotFoundError:
            parent_author = None
    assert_can_delete(settings.comment_delete_policy, comment, current_user["user_id"], parent_author)
    await CommentService.delete_comment(comment_id)
    return {"msg": "Comment deleted successfully!"}
