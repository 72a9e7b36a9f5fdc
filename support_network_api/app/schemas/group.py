"""Pydantic schemas for groups."""

from typing import List

from pydantic import BaseModel, Field, field_validator


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def no_slash(cls, v: str) -> str:
        if "/" in v:
            raise ValueError("Group name must not contain '/'")
        return v


class GroupRead(BaseModel):
    """A group and its member ids, duplicates included."""

    id: int
    name: str
    members: List[int] = Field(default_factory=list)
