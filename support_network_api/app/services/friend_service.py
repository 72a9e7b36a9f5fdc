"""
Business logic for friending.

Friendships are symmetric: a row ``(user1, user2)`` in ``friends``
means both users are friends with each other, and every lookup checks
both orders.  Friend requests move from ``pending`` to ``accepted`` or
``rejected``; only pending requests can be accepted, rejected or
withdrawn, and at most one pending request may exist per pair.
"""

import logging
import sqlite3
from typing import Any, Dict, List

from ..core.db import get_connection
from ..core.errors import NotAllowedError, NotFoundError


logger = logging.getLogger(__name__)


class AlreadyFriendsError(NotAllowedError):
    def __init__(self, user1: int, user2: int) -> None:
        super().__init__("{0} and {1} are already friends!", user1, user2)


class FriendNotFoundError(NotFoundError):
    def __init__(self, user1: int, user2: int) -> None:
        super().__init__("Friendship between {0} and {1} not found!", user1, user2)


class FriendRequestAlreadyExistsError(NotAllowedError):
    def __init__(self, from_id: int, to_id: int) -> None:
        super().__init__("Friend request between {0} and {1} already exists!", from_id, to_id)


class FriendRequestNotFoundError(NotFoundError):
    def __init__(self, from_id: int, to_id: int) -> None:
        super().__init__("Friend request from {0} to {1} does not exist!", from_id, to_id)


class FriendService:
    """Service for friend requests and friendships."""

    @classmethod
    async def get_friends(cls, user_id: int) -> List[int]:
        """Return the ids of the user's friends, oldest friendship first."""
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT user1, user2 FROM friends WHERE user1 = ? OR user2 = ? ORDER BY id",
                (user_id, user_id),
            ).fetchall()
        finally:
            conn.close()
        return [row["user2"] if row["user1"] == user_id else row["user1"] for row in rows]

    @classmethod
    async def get_requests(cls, user_id: int) -> List[Dict[str, Any]]:
        """Return every request sent or received by the user."""
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT id, from_id, to_id, status, created_at FROM friend_requests "
                "WHERE from_id = ? OR to_id = ? ORDER BY id",
                (user_id, user_id),
            ).fetchall()
            return [dict(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def send_request(cls, from_id: int, to_id: int) -> None:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cls._assert_can_send_request(cursor, from_id, to_id)
            cursor.execute(
                "INSERT INTO friend_requests (from_id, to_id, status) VALUES (?, ?, 'pending')",
                (from_id, to_id),
            )
            conn.commit()
            logger.info("Friend request sent from %s to %s", from_id, to_id)
        finally:
            conn.close()

    @classmethod
    async def accept_request(cls, from_id: int, to_id: int) -> None:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cls._resolve_pending_request(cursor, from_id, to_id, "accepted")
            if cls._are_friends(cursor, from_id, to_id):
                raise AlreadyFriendsError(from_id, to_id)
            cursor.execute(
                "INSERT INTO friends (user1, user2) VALUES (?, ?)", (from_id, to_id)
            )
            conn.commit()
            logger.info("%s accepted friend request from %s", to_id, from_id)
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @classmethod
    async def reject_request(cls, from_id: int, to_id: int) -> None:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cls._resolve_pending_request(cursor, from_id, to_id, "rejected")
            conn.commit()
            logger.info("%s rejected friend request from %s", to_id, from_id)
        finally:
            conn.close()

    @classmethod
    async def remove_request(cls, from_id: int, to_id: int) -> None:
        """Withdraw a pending request."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM friend_requests WHERE from_id = ? AND to_id = ? AND status = 'pending'",
                (from_id, to_id),
            )
            if cursor.rowcount == 0:
                raise FriendRequestNotFoundError(from_id, to_id)
            conn.commit()
            logger.info("Friend request from %s to %s withdrawn", from_id, to_id)
        finally:
            conn.close()

    @classmethod
    async def remove_friend(cls, user_id: int, friend_id: int) -> None:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM friends WHERE (user1 = ? AND user2 = ?) OR (user1 = ? AND user2 = ?)",
                (user_id, friend_id, friend_id, user_id),
            )
            if cursor.rowcount == 0:
                raise FriendNotFoundError(user_id, friend_id)
            conn.commit()
            logger.info("%s unfriended %s", user_id, friend_id)
        finally:
            conn.close()

    @classmethod
    async def are_friends(cls, user1: int, user2: int) -> bool:
        conn = get_connection()
        try:
            return cls._are_friends(conn.cursor(), user1, user2)
        finally:
            conn.close()

    @staticmethod
    def _are_friends(cursor: sqlite3.Cursor, user1: int, user2: int) -> bool:
        row = cursor.execute(
            "SELECT 1 FROM friends WHERE (user1 = ? AND user2 = ?) OR (user1 = ? AND user2 = ?)",
            (user1, user2, user2, user1),
        ).fetchone()
        return row is not None

    @classmethod
    def _assert_can_send_request(cls, cursor: sqlite3.Cursor, from_id: int, to_id: int) -> None:
        if from_id == to_id:
            raise NotAllowedError("Cannot send friend request to self!")
        if cls._are_friends(cursor, from_id, to_id):
            raise AlreadyFriendsError(from_id, to_id)
        pending = cursor.execute(
            "SELECT 1 FROM friend_requests WHERE status = 'pending' AND "
            "((from_id = ? AND to_id = ?) OR (from_id = ? AND to_id = ?))",
            (from_id, to_id, to_id, from_id),
        ).fetchone()
        if pending:
            raise FriendRequestAlreadyExistsError(from_id, to_id)

    @staticmethod
    def _resolve_pending_request(cursor: sqlite3.Cursor, from_id: int, to_id: int, status: str) -> None:
        cursor.execute(
            "UPDATE friend_requests SET status = ?, updated_at = CURRENT_TIMESTAMP "
            "WHERE from_id = ? AND to_id = ? AND status = 'pending'",
            (status, from_id, to_id),
        )
        if cursor.rowcount == 0:
            raise FriendRequestNotFoundError(from_id, to_id)
