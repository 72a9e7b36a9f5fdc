"""
Pydantic schemas for posts.

A post may be created inside a community; the community name is only
used by the route layer to label the new post and is not stored on the
post itself.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class PostOptions(BaseModel):
    """Optional presentation settings of a post."""

    background_color: Optional[str] = Field(None, alias="backgroundColor")

    model_config = {
        "populate_by_name": True,
    }


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    content: str = Field(..., description="Post body")
    community: Optional[str] = Field(None, description="Community to publish the post in")
    options: Optional[PostOptions] = None

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        return v.strip()


class PostUpdate(BaseModel):
    content: Optional[str] = None
    options: Optional[PostOptions] = None


class PostRead(BaseModel):
    """A post as returned by the API, with the author's username."""

    id: int
    author: str
    content: str
    options: Optional[PostOptions] = None
    created_at: str
    updated_at: str
