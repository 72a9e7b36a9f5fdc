"""
Pydantic schemas for comments.

Comments are attached to a parent item (a post).  Content is trimmed
and limited in length on input.
"""

from pydantic import BaseModel, Field, field_validator


class CommentCreate(BaseModel):
    """Schema for adding a comment to a post."""

    content: str = Field(..., description="Comment text")

    @field_validator("content")
    @classmethod
    def sanitize_content(cls, v: str) -> str:
        """Trim whitespace and enforce a maximum length."""
        v = v.strip()
        if not v:
            raise ValueError("Comment must be non-empty")
        if len(v) > 1000:
            raise ValueError("Comment must be 1000 characters or fewer")
        return v


class CommentRead(BaseModel):
    id: int
    parent_id: int
    author_id: int
    content: str
    created_at: str
