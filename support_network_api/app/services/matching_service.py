"""
Matching concept: an opt‑in set and symmetric match records.

The set of entities eligible for matching lives in the ``matchable``
table keyed by entity id, so it survives restarts and is shared by
every server process.  A match ``(a, b)`` is recorded once and is
considered equal to ``(b, a)`` by every query.
"""

import logging
import sqlite3
from typing import List

from ..core.db import get_connection
from ..core.errors import NotAllowedError
from ..schemas.match import MatchRead


logger = logging.getLogger(__name__)


class EntityAlreadyOptedInError(NotAllowedError):
    def __init__(self, entity: int) -> None:
        super().__init__("{0} is already opted in to matching!", entity)


class EntityNotOptedInError(NotAllowedError):
    def __init__(self, entity: int) -> None:
        super().__init__("{0} hasn't opted in to matching!", entity)


def _to_match(row: sqlite3.Row) -> MatchRead:
    return MatchRead(
        id=row["id"],
        entity1=row["entity1"],
        entity2=row["entity2"],
        created_at=row["created_at"],
    )


class MatchingService:
    """Service for opting in/out of matching and recording matches."""

    @classmethod
    async def opt_in(cls, entity: int) -> None:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            try:
                cursor.execute("INSERT INTO matchable (entity) VALUES (?)", (int(entity),))
            except sqlite3.IntegrityError:
                raise EntityAlreadyOptedInError(entity)
            conn.commit()
            logger.info("%s opted in to matching", entity)
        finally:
            conn.close()

    @classmethod
    async def opt_out(cls, entity: int) -> None:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM matchable WHERE entity = ?", (int(entity),))
            if cursor.rowcount == 0:
                raise EntityNotOptedInError(entity)
            conn.commit()
            logger.info("%s opted out of matching", entity)
        finally:
            conn.close()

    @classmethod
    async def check_if_matchable(cls, entity: int) -> bool:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT 1 FROM matchable WHERE entity = ?", (int(entity),)
            ).fetchone()
            return row is not None
        finally:
            conn.close()

    @classmethod
    async def create_match(cls, entity1: int, entity2: int) -> MatchRead:
        """Record a match.  Callers check ``check_if_matched`` first."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO matches (entity1, entity2) VALUES (?, ?)",
                (int(entity1), int(entity2)),
            )
            match_id = cursor.lastrowid
            conn.commit()
            row = cursor.execute(
                "SELECT id, entity1, entity2, created_at FROM matches WHERE id = ?",
                (match_id,),
            ).fetchone()
            logger.info("Matched %s with %s", entity1, entity2)
            return _to_match(row)
        finally:
            conn.close()

    @classmethod
    async def check_if_matched(cls, entity1: int, entity2: int) -> bool:
        a, b = int(entity1), int(entity2)
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT 1 FROM matches WHERE (entity1 = ? AND entity2 = ?) OR (entity1 = ? AND entity2 = ?)",
                (a, b, b, a),
            ).fetchone()
            return row is not None
        finally:
            conn.close()

    @classmethod
    async def get_matches(cls, entity: int) -> List[MatchRead]:
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT id, entity1, entity2, created_at FROM matches "
                "WHERE entity1 = ? OR entity2 = ? ORDER BY id",
                (int(entity), int(entity)),
            ).fetchall()
            return [_to_match(row) for row in rows]
        finally:
            conn.close()
