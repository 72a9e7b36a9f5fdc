"""
Labeling concept: named sets of items.

A label maps a unique name to a set of item identifiers.  Several
independent labeling instances share the ``labels`` and ``label_items``
tables, each under its own namespace: community membership labels users,
community feeds label posts, and symptom search labels communities with
free‑text symptoms.

Items are compared by value.  Every identifier is normalised with
``str()`` before it is stored or looked up, so ``7`` and another ``7``
(or ``"7"``) always refer to the same item, and the unique constraint on
``(label_id, item)`` guarantees an item is attached at most once.
Items read back are converted with the instance's ``item_type``.
"""

import logging
import sqlite3
from typing import Any, Callable, Dict, List, Optional, Union

from ..core.db import get_connection
from ..core.errors import BadValuesError, NotAllowedError, NotFoundError
from ..schemas.label import LabelRead


logger = logging.getLogger(__name__)

ItemId = Union[int, str]


class LabelAlreadyExistsError(NotAllowedError):
    def __init__(self, name: str) -> None:
        super().__init__("Label {0} already exists!", name)


class LabelNotFoundError(NotFoundError):
    def __init__(self, name: str) -> None:
        super().__init__("Label {0} does not exist!", name)


class ItemAlreadyLabeledError(NotAllowedError):
    def __init__(self, item: ItemId, name: str) -> None:
        super().__init__("{0} is already labeled {1}!", item, name)


class LabelingService:
    """One labeling instance, bound to a namespace."""

    def __init__(
        self,
        namespace: str,
        item_type: Callable[[str], Any] = int,
        normalize: Optional[Callable[[ItemId], str]] = None,
    ) -> None:
        self.namespace = namespace
        self.item_type = item_type
        self._normalize = normalize or str

    def key(self, item: ItemId) -> str:
        """Return the stored form of ``item``."""
        return self._normalize(item)

    async def create_label(self, name: str) -> LabelRead:
        conn = get_connection()
        try:
            label_id = self.insert_label(conn.cursor(), name)
            conn.commit()
            return LabelRead(id=label_id, name=name, items=[])
        finally:
            conn.close()

    async def affix_label(self, item: ItemId, name: str) -> None:
        """Attach ``item`` to the label ``name``."""
        conn = get_connection()
        try:
            self.insert_item(conn.cursor(), item, name)
            conn.commit()
        finally:
            conn.close()

    def insert_label(self, cursor: sqlite3.Cursor, name: str) -> int:
        """Insert the label within the caller's transaction and return its id."""
        if self._find_label_id(cursor, name) is not None:
            raise LabelAlreadyExistsError(name)
        try:
            cursor.execute(
                "INSERT INTO labels (namespace, name) VALUES (?, ?)",
                (self.namespace, name),
            )
        except sqlite3.IntegrityError:
            raise LabelAlreadyExistsError(name)
        logger.info("Created label %s/%s", self.namespace, name)
        return cursor.lastrowid

    def insert_item(self, cursor: sqlite3.Cursor, item: ItemId, name: str) -> None:
        """Attach ``item`` within the caller's transaction."""
        key = self.key(item)
        label_id = self._get_label_id(cursor, name)
        try:
            cursor.execute(
                "INSERT INTO label_items (label_id, item) VALUES (?, ?)",
                (label_id, key),
            )
        except sqlite3.IntegrityError:
            raise ItemAlreadyLabeledError(item, name)
        logger.info("Labeled %s as %s/%s", key, self.namespace, name)

    async def remove_label(self, item: ItemId, name: str) -> None:
        """Detach ``item`` from the label.  Detaching a non‑member is a no‑op."""
        key = self.key(item)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            label_id = self._get_label_id(cursor, name)
            cursor.execute(
                "DELETE FROM label_items WHERE label_id = ? AND item = ?",
                (label_id, key),
            )
            conn.commit()
            if cursor.rowcount:
                logger.info("Removed label %s/%s from %s", self.namespace, name, key)
        finally:
            conn.close()

    async def find_items_by_label(self, name: str) -> List[Any]:
        """Return the items attached to the label, in attach order."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            label_id = self._get_label_id(cursor, name)
            rows = cursor.execute(
                "SELECT item FROM label_items WHERE label_id = ? ORDER BY id",
                (label_id,),
            ).fetchall()
            return [self.item_type(row["item"]) for row in rows]
        finally:
            conn.close()

    async def get_item_labels(self, item: ItemId) -> List[str]:
        """Return the names of the labels attached to ``item``, oldest label first."""
        return [label.name for label in await self.find_labels_by_item(item)]

    async def find_labels_by_item(self, item: ItemId) -> List[LabelRead]:
        """Return the full labels that contain ``item``, oldest label first."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            rows = cursor.execute(
                "SELECT l.id, l.name FROM labels l JOIN label_items li ON li.label_id = l.id "
                "WHERE l.namespace = ? AND li.item = ? ORDER BY l.id",
                (self.namespace, self.key(item)),
            ).fetchall()
            items = self._items_for(cursor, [row["id"] for row in rows])
            return [
                LabelRead(id=row["id"], name=row["name"], items=items.get(row["id"], []))
                for row in rows
            ]
        finally:
            conn.close()

    async def label_exists(self, name: str) -> bool:
        conn = get_connection()
        try:
            return self._find_label_id(conn.cursor(), name) is not None
        finally:
            conn.close()

    async def list_labels(self) -> List[LabelRead]:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            rows = cursor.execute(
                "SELECT id, name FROM labels WHERE namespace = ? ORDER BY id",
                (self.namespace,),
            ).fetchall()
            items = self._items_for(cursor, [row["id"] for row in rows])
            return [
                LabelRead(id=row["id"], name=row["name"], items=items.get(row["id"], []))
                for row in rows
            ]
        finally:
            conn.close()

    def _items_for(self, cursor: sqlite3.Cursor, label_ids: List[int]) -> Dict[int, List[Any]]:
        if not label_ids:
            return {}
        placeholders = ", ".join("?" for _ in label_ids)
        rows = cursor.execute(
            f"SELECT label_id, item FROM label_items WHERE label_id IN ({placeholders}) ORDER BY id",
            tuple(label_ids),
        ).fetchall()
        items: Dict[int, List[Any]] = {}
        for row in rows:
            items.setdefault(row["label_id"], []).append(self.item_type(row["item"]))
        return items

    def _find_label_id(self, cursor: sqlite3.Cursor, name: str) -> Optional[int]:
        row = cursor.execute(
            "SELECT id FROM labels WHERE namespace = ? AND name = ?",
            (self.namespace, name),
        ).fetchone()
        return row["id"] if row else None

    def _get_label_id(self, cursor: sqlite3.Cursor, name: str) -> int:
        label_id = self._find_label_id(cursor, name)
        if label_id is None:
            raise LabelNotFoundError(name)
        return label_id


def normalize_symptom(symptom: ItemId) -> str:
    """Symptoms match case‑insensitively, ignoring surrounding whitespace.

    Raises ``BadValuesError`` for a symptom with no visible characters.
    """
    normalized = " ".join(str(symptom).split()).lower()
    if not normalized:
        raise BadValuesError("Symptom must be non-empty!")
    return normalized


community_members = LabelingService("community_members")
community_posts = LabelingService("community_posts")
community_symptoms = LabelingService("community_symptoms", item_type=str, normalize=normalize_symptom)
