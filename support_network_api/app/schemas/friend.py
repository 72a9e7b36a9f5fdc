"""Pydantic schemas for friend requests."""

from pydantic import BaseModel


class FriendRequestRead(BaseModel):
    """A friend request with usernames in place of user ids."""

    id: int
    sender: str
    recipient: str
    status: str
    created_at: str
