"""
Pydantic schemas for labels and communities.

A community is the pair of labels of the same name in the
``community_members`` and ``community_posts`` namespaces; the API only
ever exposes the community name.
"""

from typing import List, Union

from pydantic import BaseModel, Field, field_validator


class LabelRead(BaseModel):
    """A label together with the items attached to it, in attach order."""

    id: int
    name: str
    items: List[Union[int, str]] = Field(default_factory=list)


class CommunityCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Community name")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Community name must be non-empty")
        # Names are used as a single path segment in /communities/{name}/...
        if "/" in v:
            raise ValueError("Community name must not contain '/'")
        return v


class SymptomCreate(BaseModel):
    symptom: str = Field(..., min_length=1)

    @field_validator("symptom")
    @classmethod
    def collapse_whitespace(cls, v: str) -> str:
        v = " ".join(v.split())
        if not v:
            raise ValueError("Symptom must be non-empty")
        return v
