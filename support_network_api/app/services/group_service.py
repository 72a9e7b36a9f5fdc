"""
Grouping concept: named lists of members.

Unlike labels, groups enforce no uniqueness: two groups may share a
name (lookups by name resolve to the earliest‑created one) and joining
twice records two memberships.  Leaving removes every membership row
of the user, compared by id value.
"""

import logging
import sqlite3
from typing import List

from ..core.db import get_connection
from ..core.errors import NotFoundError
from ..schemas.group import GroupRead


logger = logging.getLogger(__name__)


class GroupNotFoundError(NotFoundError):
    def __init__(self, name: str) -> None:
        super().__init__("Group {0} does not exist!", name)


class GroupService:
    """Service for creating, joining and leaving groups."""

    @classmethod
    async def create_group(cls, name: str) -> GroupRead:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("INSERT INTO user_groups (name) VALUES (?)", (name,))
            group_id = cursor.lastrowid
            conn.commit()
            logger.info("Created group %s (%s)", name, group_id)
            return GroupRead(id=group_id, name=name, members=[])
        finally:
            conn.close()

    @classmethod
    async def list_groups(cls) -> List[GroupRead]:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            rows = cursor.execute("SELECT id, name FROM user_groups ORDER BY id").fetchall()
            return [
                GroupRead(id=row["id"], name=row["name"], members=cls._members(cursor, row["id"]))
                for row in rows
            ]
        finally:
            conn.close()

    @classmethod
    async def join_group(cls, user_id: int, name: str) -> None:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            group_id = cls._get_group_id(cursor, name)
            cursor.execute(
                "INSERT INTO user_group_members (group_id, member_id) VALUES (?, ?)",
                (group_id, int(user_id)),
            )
            conn.commit()
            logger.info("User %s joined group %s", user_id, name)
        finally:
            conn.close()

    @classmethod
    async def leave_group(cls, user_id: int, name: str) -> None:
        """Remove the user from the group.  Leaving as a non‑member is a no‑op."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            group_id = cls._get_group_id(cursor, name)
            cursor.execute(
                "DELETE FROM user_group_members WHERE group_id = ? AND member_id = ?",
                (group_id, int(user_id)),
            )
            conn.commit()
            if cursor.rowcount:
                logger.info("User %s left group %s", user_id, name)
        finally:
            conn.close()

    @classmethod
    async def get_members(cls, name: str) -> List[int]:
        """Return the member ids of the group, in join order."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            return cls._members(cursor, cls._get_group_id(cursor, name))
        finally:
            conn.close()

    @classmethod
    async def get_groups_for_user(cls, user_id: int) -> List[str]:
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT DISTINCT g.id, g.name FROM user_groups g "
                "JOIN user_group_members m ON m.group_id = g.id "
                "WHERE m.member_id = ? ORDER BY g.id",
                (int(user_id),),
            ).fetchall()
            return [row["name"] for row in rows]
        finally:
            conn.close()

    @staticmethod
    def _members(cursor: sqlite3.Cursor, group_id: int) -> List[int]:
        rows = cursor.execute(
            "SELECT member_id FROM user_group_members WHERE group_id = ? ORDER BY id",
            (group_id,),
        ).fetchall()
        return [row["member_id"] for row in rows]

    @staticmethod
    def _get_group_id(cursor: sqlite3.Cursor, name: str) -> int:
        row = cursor.execute(
            "SELECT id FROM user_groups WHERE name = ? ORDER BY id LIMIT 1", (name,)
        ).fetchone()
        if not row:
            raise GroupNotFoundError(name)
        return row["id"]
