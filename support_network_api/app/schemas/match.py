"""Pydantic schemas for matches."""

from typing import Optional

from pydantic import BaseModel


class MatchRead(BaseModel):
    id: int
    entity1: int
    entity2: int
    created_at: str


class BuddyMatchResult(BaseModel):
    """Outcome of a buddy search.  ``buddy`` is ``None`` when nobody qualified."""

    msg: str
    buddy: Optional[str] = None
    match: Optional[MatchRead] = None
