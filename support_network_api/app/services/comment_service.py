"""
Commenting concept: author/content records keyed by a parent item.

The concept itself performs no ownership checks.  Who may delete a
comment is decided by ``assert_can_delete`` according to the configured
policy (``settings.comment_delete_policy``), which the route layer calls
before ``delete_comment``.
"""

import logging
import sqlite3
from typing import List, Optional

from ..core.config import COMMENT_DELETE_POLICIES
from ..core.db import get_connection
from ..core.errors import NotAllowedError, NotFoundError
from ..schemas.comment import CommentRead


logger = logging.getLogger(__name__)


class CommentNotFoundError(NotFoundError):
    def __init__(self, comment_id: int) -> None:
        super().__init__("Comment {0} does not exist!", comment_id)


class CommentAuthorNotMatchError(NotAllowedError):
    def __init__(self, user_id: int, comment_id: int) -> None:
        super().__init__("{0} is not allowed to delete comment {1}!", user_id, comment_id)


def _to_comment(row: sqlite3.Row) -> CommentRead:
    return CommentRead(
        id=row["id"],
        parent_id=row["parent_id"],
        author_id=row["author_id"],
        content=row["content"],
        created_at=row["created_at"],
    )


def assert_can_delete(
    policy: str,
    comment: CommentRead,
    user_id: int,
    parent_author_id: Optional[int] = None,
) -> None:
    """Raise ``NotAllowedError`` unless ``user_id`` may delete ``comment`` under ``policy``."""
    if policy not in COMMENT_DELETE_POLICIES:
        raise ValueError(f"Unknown comment delete policy: {policy}")
    if policy == "anyone":
        return
    if comment.author_id == user_id:
        return
    if policy == "post_author" and parent_author_id == user_id:
        return
    raise CommentAuthorNotMatchError(user_id, comment.id)


class CommentService:
    """Service for adding, listing and deleting comments."""

    @classmethod
    async def add_comment(cls, parent_id: int, author_id: int, content: str) -> CommentRead:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO comments (parent_id, author_id, content) VALUES (?, ?, ?)",
                (parent_id, author_id, content),
            )
            comment_id = cursor.lastrowid
            conn.commit()
            row = cursor.execute(
                "SELECT id, parent_id, author_id, content, created_at FROM comments WHERE id = ?",
                (comment_id,),
            ).fetchone()
            logger.info("User %s commented %s on %s", author_id, comment_id, parent_id)
            return _to_comment(row)
        finally:
            conn.close()

    @classmethod
    async def get_comment(cls, comment_id: int) -> CommentRead:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, parent_id, author_id, content, created_at FROM comments WHERE id = ?",
                (comment_id,),
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise CommentNotFoundError(comment_id)
        return _to_comment(row)

    @classmethod
    async def delete_comment(cls, comment_id: int) -> None:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM comments WHERE id = ?", (comment_id,))
            if cursor.rowcount == 0:
                raise CommentNotFoundError(comment_id)
            conn.commit()
            logger.info("Comment %s deleted", comment_id)
        finally:
            conn.close()

    @classmethod
    async def get_item_comments(cls, parent_id: int) -> List[CommentRead]:
        """Return the comments on ``parent_id``, oldest first."""
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT id, parent_id, author_id, content, created_at FROM comments "
                "WHERE parent_id = ? ORDER BY id",
                (parent_id,),
            ).fetchall()
            return [_to_comment(row) for row in rows]
        finally:
            conn.close()
