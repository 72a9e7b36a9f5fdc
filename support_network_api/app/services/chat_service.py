"""
Messaging concept: one‑to‑one chats and their messages.

There is at most one chat per unordered pair of users.  A message can
only be sent inside an existing chat.
"""

import logging
import sqlite3
from typing import List, Optional

from ..core.db import get_connection
from ..core.errors import BadValuesError, NotAllowedError, NotFoundError
from ..schemas.chat import ChatRead, MessageRead


logger = logging.getLogger(__name__)


class ChatAlreadyExistsError(NotAllowedError):
    def __init__(self, user1: int, user2: int) -> None:
        super().__init__("Chat between {0} and {1} already exists!", user1, user2)


class ChatNotFoundError(NotFoundError):
    def __init__(self, user1: int, user2: int) -> None:
        super().__init__("Chat between {0} and {1} does not exist!", user1, user2)


def _to_chat(row: sqlite3.Row) -> ChatRead:
    return ChatRead(id=row["id"], user1=row["user1"], user2=row["user2"], created_at=row["created_at"])


class ChatService:
    """Service for starting chats and exchanging messages."""

    @classmethod
    async def start_chat(cls, user_id: int, chatter_id: int) -> ChatRead:
        if user_id == chatter_id:
            raise NotAllowedError("Cannot start a chat with yourself!")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if cls._find_chat(cursor, user_id, chatter_id) is not None:
                raise ChatAlreadyExistsError(user_id, chatter_id)
            return cls._insert_chat(conn, cursor, user_id, chatter_id)
        finally:
            conn.close()

    @classmethod
    async def get_or_start_chat(cls, user_id: int, chatter_id: int) -> ChatRead:
        """Return the pair's chat, starting one if they have none yet."""
        if user_id == chatter_id:
            raise NotAllowedError("Cannot start a chat with yourself!")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cls._find_chat(cursor, user_id, chatter_id)
            if row is not None:
                return _to_chat(row)
            return cls._insert_chat(conn, cursor, user_id, chatter_id)
        finally:
            conn.close()

    @classmethod
    async def get_chats(cls, user_id: int) -> List[ChatRead]:
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT id, user1, user2, created_at FROM chats WHERE user1 = ? OR user2 = ? ORDER BY id",
                (user_id, user_id),
            ).fetchall()
            return [_to_chat(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_chat_messages(cls, user_id: int, chatter_id: int) -> List[MessageRead]:
        """Return the pair's messages, oldest first."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            chat = cls._find_chat(cursor, user_id, chatter_id)
            if chat is None:
                raise ChatNotFoundError(user_id, chatter_id)
            rows = cursor.execute(
                "SELECT id, chat_id, sender_id, content, created_at FROM messages "
                "WHERE chat_id = ? ORDER BY id",
                (chat["id"],),
            ).fetchall()
            return [MessageRead(**dict(row)) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def send_message(cls, to_id: int, sender_id: int, content: str) -> MessageRead:
        if not content:
            raise BadValuesError("Message content must be non-empty!")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            chat = cls._find_chat(cursor, sender_id, to_id)
            if chat is None:
                raise ChatNotFoundError(sender_id, to_id)
            cursor.execute(
                "INSERT INTO messages (chat_id, sender_id, content) VALUES (?, ?, ?)",
                (chat["id"], sender_id, content),
            )
            message_id = cursor.lastrowid
            conn.commit()
            row = cursor.execute(
                "SELECT id, chat_id, sender_id, content, created_at FROM messages WHERE id = ?",
                (message_id,),
            ).fetchone()
            logger.info("User %s sent message %s to %s", sender_id, message_id, to_id)
            return MessageRead(**dict(row))
        finally:
            conn.close()

    @staticmethod
    def _find_chat(cursor: sqlite3.Cursor, user1: int, user2: int) -> Optional[sqlite3.Row]:
        return cursor.execute(
            "SELECT id, user1, user2, created_at FROM chats "
            "WHERE (user1 = ? AND user2 = ?) OR (user1 = ? AND user2 = ?)",
            (user1, user2, user2, user1),
        ).fetchone()

    @staticmethod
    def _insert_chat(conn: sqlite3.Connection, cursor: sqlite3.Cursor, user1: int, user2: int) -> ChatRead:
        cursor.execute("INSERT INTO chats (user1, user2) VALUES (?, ?)", (user1, user2))
        chat_id = cursor.lastrowid
        conn.commit()
        logger.info("Started chat %s between %s and %s", chat_id, user1, user2)
        row = cursor.execute(
            "SELECT id, user1, user2, created_at FROM chats WHERE id = ?", (chat_id,)
        ).fetchone()
        return _to_chat(row)
