"""
Business logic for users (authentication concept).

The ``UserService`` stores users in the ``users`` table with a unique
username and a PBKDF2 password hash.  Sessions are not handled here;
see ``core.security``.
"""

import logging
import sqlite3
from typing import Iterable, List, Optional

from ..core.db import get_connection
from ..core.errors import BadValuesError, NotAllowedError, NotFoundError
from ..core.security import hash_password, verify_password
from ..schemas.user import UserRead


logger = logging.getLogger(__name__)

DELETED_USER = "DELETED_USER"


def _to_user(row: sqlite3.Row) -> UserRead:
    return UserRead(id=row["id"], username=row["username"], created_at=row["created_at"])


class UserService:
    """Service for registering, authenticating and managing users."""

    @classmethod
    async def create_user(cls, username: str, password: str) -> UserRead:
        """Register a new user.

        Raises ``BadValuesError`` when the username or password is empty
        and ``NotAllowedError`` when the username is taken.
        """
        if not username or not password:
            raise BadValuesError("Username and password must be non-empty!")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cls._assert_username_unique(cursor, username)
            cursor.execute(
                "INSERT INTO users (username, password) VALUES (?, ?)",
                (username, hash_password(password)),
            )
            user_id = cursor.lastrowid
            conn.commit()
            row = cursor.execute(
                "SELECT id, username, created_at FROM users WHERE id = ?", (user_id,)
            ).fetchone()
            logger.info("Registered user %s (%s)", username, user_id)
            return _to_user(row)
        except sqlite3.IntegrityError:
            # Lost a race against a concurrent sign‑up with the same name.
            conn.rollback()
            raise NotAllowedError("User with username {0} already exists!", username)
        finally:
            conn.close()

    @classmethod
    async def authenticate(cls, username: str, password: str) -> UserRead:
        """Return the user if the credentials match.

        The same error is raised for an unknown username and a wrong
        password so that callers cannot probe for usernames.
        """
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, username, password, created_at FROM users WHERE username = ?",
                (username,),
            ).fetchone()
        finally:
            conn.close()
        if not row or not verify_password(password, row["password"]):
            raise NotAllowedError("Username or password is incorrect.")
        return _to_user(row)

    @classmethod
    async def get_user_by_id(cls, user_id: int) -> UserRead:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, username, created_at FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError("User not found!")
        return _to_user(row)

    @classmethod
    async def get_user_by_username(cls, username: str) -> UserRead:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, username, created_at FROM users WHERE username = ?", (username,)
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError("User with username {0} does not exist!", username)
        return _to_user(row)

    @classmethod
    async def list_users(cls, prefix: Optional[str] = None) -> List[UserRead]:
        """Return all users, optionally only those whose username starts with ``prefix``."""
        conn = get_connection()
        try:
            if prefix:
                # Escape LIKE wildcards so the prefix is matched literally.
                escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
                rows = conn.execute(
                    "SELECT id, username, created_at FROM users WHERE username LIKE ? ESCAPE '\\' ORDER BY id",
                    (escaped + "%",),
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT id, username, created_at FROM users ORDER BY id"
                ).fetchall()
            return [_to_user(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def ids_to_usernames(cls, ids: Iterable[int]) -> List[str]:
        """Translate user ids to usernames, keeping the input order.

        Ids of users that no longer exist map to ``DELETED_USER``.
        """
        ids = list(ids)
        if not ids:
            return []
        conn = get_connection()
        try:
            placeholders = ", ".join("?" for _ in ids)
            rows = conn.execute(
                f"SELECT id, username FROM users WHERE id IN ({placeholders})",
                tuple(ids),
            ).fetchall()
        finally:
            conn.close()
        names = {row["id"]: row["username"] for row in rows}
        return [names.get(user_id, DELETED_USER) for user_id in ids]

    @classmethod
    async def update_username(cls, user_id: int, username: str) -> UserRead:
        if not username:
            raise BadValuesError("Username must be non-empty!")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM users WHERE id = ?", (user_id,)).fetchone():
                raise NotFoundError("User not found!")
            cls._assert_username_unique(cursor, username)
            cursor.execute(
                "UPDATE users SET username = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (username, user_id),
            )
            conn.commit()
            logger.info("User %s renamed to %s", user_id, username)
            row = cursor.execute(
                "SELECT id, username, created_at FROM users WHERE id = ?", (user_id,)
            ).fetchone()
            return _to_user(row)
        finally:
            conn.close()

    @classmethod
    async def update_password(cls, user_id: int, current_password: str, new_password: str) -> None:
        """Replace the password after verifying the current one."""
        if not new_password:
            raise BadValuesError("Password must be non-empty!")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cursor.execute("SELECT password FROM users WHERE id = ?", (user_id,)).fetchone()
            if not row:
                raise NotFoundError("User not found!")
            if not verify_password(current_password, row["password"]):
                raise NotAllowedError("The given current password is wrong!")
            cursor.execute(
                "UPDATE users SET password = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (hash_password(new_password), user_id),
            )
            conn.commit()
            logger.info("User %s changed password", user_id)
        finally:
            conn.close()

    @classmethod
    async def delete_user(cls, user_id: int) -> None:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM users WHERE id = ?", (user_id,))
            if cursor.rowcount == 0:
                raise NotFoundError("User not found!")
            conn.commit()
            logger.info("Deleted user %s", user_id)
        finally:
            conn.close()

    @staticmethod
    def _assert_username_unique(cursor: sqlite3.Cursor, username: str) -> None:
        if cursor.execute("SELECT 1 FROM users WHERE username = ?", (username,)).fetchone():
            raise NotAllowedError("User with username {0} already exists!", username)
