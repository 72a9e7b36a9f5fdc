"""Pydantic schemas for chats and chat messages."""

from pydantic import BaseModel, Field, field_validator


class ChatRead(BaseModel):
    id: int
    user1: int
    user2: int
    created_at: str


class MessageCreate(BaseModel):
    content: str = Field(..., description="Message text")

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        return v.strip()


class MessageRead(BaseModel):
    id: int
    chat_id: int
    sender_id: int
    content: str
    created_at: str
