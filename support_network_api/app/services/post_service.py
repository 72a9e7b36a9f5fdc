"""
Business logic for posts.

Posts are stored in the ``posts`` table with their author id.  The
service returns raw records keyed by author id; translating author ids
to usernames for the API is done in ``services.responses``.
"""

import logging
import sqlite3
from typing import Any, Dict, List, Optional

from ..core.db import get_connection
from ..core.errors import BadValuesError, NotAllowedError, NotFoundError
from ..schemas.post import PostOptions


logger = logging.getLogger(__name__)

_POST_COLUMNS = "id, author_id, content, background_color, created_at, updated_at"


def _to_record(row: sqlite3.Row) -> Dict[str, Any]:
    options = None
    if row["background_color"] is not None:
        options = PostOptions(background_color=row["background_color"])
    return {
        "id": row["id"],
        "author_id": row["author_id"],
        "content": row["content"],
        "options": options,
        "created_at": row["created_at"],
        "updated_at": row["updated_at"],
    }


class PostAuthorNotMatchError(NotAllowedError):
    def __init__(self, author: int, post_id: int) -> None:
        super().__init__("{0} is not the author of post {1}!", author, post_id)


class PostService:
    """Service for creating, editing and listing posts."""

    @classmethod
    async def create_post(
        cls,
        author_id: int,
        content: str,
        options: Optional[PostOptions] = None,
    ) -> Dict[str, Any]:
        if not content:
            raise BadValuesError("Post content must be non-empty!")
        background = options.background_color if options else None
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO posts (author_id, content, background_color) VALUES (?, ?, ?)",
                (author_id, content, background),
            )
            post_id = cursor.lastrowid
            conn.commit()
            row = cursor.execute(
                f"SELECT {_POST_COLUMNS} FROM posts WHERE id = ?", (post_id,)
            ).fetchone()
            logger.info("User %s created post %s", author_id, post_id)
            return _to_record(row)
        finally:
            conn.close()

    @classmethod
    async def get_post(cls, post_id: int) -> Dict[str, Any]:
        conn = get_connection()
        try:
            row = conn.execute(
                f"SELECT {_POST_COLUMNS} FROM posts WHERE id = ?", (post_id,)
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError("Post {0} does not exist!", post_id)
        return _to_record(row)

    @classmethod
    async def get_posts_by_ids(cls, post_ids: List[int]) -> List[Dict[str, Any]]:
        """Return the existing posts among ``post_ids``, in the given order."""
        if not post_ids:
            return []
        conn = get_connection()
        try:
            placeholders = ", ".join("?" for _ in post_ids)
            rows = conn.execute(
                f"SELECT {_POST_COLUMNS} FROM posts WHERE id IN ({placeholders})",
                tuple(post_ids),
            ).fetchall()
        finally:
            conn.close()
        by_id = {row["id"]: _to_record(row) for row in rows}
        return [by_id[post_id] for post_id in post_ids if post_id in by_id]

    @classmethod
    async def list_posts(cls) -> List[Dict[str, Any]]:
        """Return every post, most recently updated first."""
        conn = get_connection()
        try:
            rows = conn.execute(
                f"SELECT {_POST_COLUMNS} FROM posts ORDER BY updated_at DESC, id DESC"
            ).fetchall()
            return [_to_record(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def list_posts_by_author(cls, author_id: int) -> List[Dict[str, Any]]:
        conn = get_connection()
        try:
            rows = conn.execute(
                f"SELECT {_POST_COLUMNS} FROM posts WHERE author_id = ? ORDER BY updated_at DESC, id DESC",
                (author_id,),
            ).fetchall()
            return [_to_record(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def update_post(
        cls,
        post_id: int,
        content: Optional[str] = None,
        options: Optional[PostOptions] = None,
    ) -> Dict[str, Any]:
        """Apply a partial update; fields left as ``None`` are unchanged."""
        fields: List[str] = []
        values: List[Any] = []
        if content is not None:
            content = content.strip()
            if not content:
                raise BadValuesError("Post content must be non-empty!")
            fields.append("content = ?")
            values.append(content)
        if options is not None:
            fields.append("background_color = ?")
            values.append(options.background_color)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM posts WHERE id = ?", (post_id,)).fetchone():
                raise NotFoundError("Post {0} does not exist!", post_id)
            if fields:
                values.append(post_id)
                cursor.execute(
                    f"UPDATE posts SET {', '.join(fields)}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    tuple(values),
                )
                conn.commit()
                logger.info("Post %s updated", post_id)
            row = cursor.execute(
                f"SELECT {_POST_COLUMNS} FROM posts WHERE id = ?", (post_id,)
            ).fetchone()
            return _to_record(row)
        finally:
            conn.close()

    @classmethod
    async def delete_post(cls, post_id: int) -> None:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM posts WHERE id = ?", (post_id,))
            if cursor.rowcount == 0:
                raise NotFoundError("Post {0} does not exist!", post_id)
            conn.commit()
            logger.info("Post %s deleted", post_id)
        finally:
            conn.close()

    @classmethod
    async def assert_author_is_user(cls, post_id: int, user_id: int) -> None:
        post = await cls.get_post(post_id)
        if post["author_id"] != user_id:
            raise PostAuthorNotMatchError(user_id, post_id)
