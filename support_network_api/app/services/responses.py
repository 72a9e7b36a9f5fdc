"""
Shaping of concept records into API responses.

Concepts store user ids; the API shows usernames.  These helpers do the
translation in bulk so a list of posts or requests costs one user
lookup.
"""

from typing import Any, Dict, List

from ..schemas.friend import FriendRequestRead
from ..schemas.post import PostRead
from .user_service import UserService


async def post(record: Dict[str, Any]) -> PostRead:
    return (await posts([record]))[0]


async def posts(records: List[Dict[str, Any]]) -> List[PostRead]:
    authors = await UserService.ids_to_usernames(r["author_id"] for r in records)
    return [
        PostRead(
            id=r["id"],
            author=author,
            content=r["content"],
            options=r["options"],
            created_at=r["created_at"],
            updated_at=r["updated_at"],
        )
        for r, author in zip(records, authors)
    ]


async def friend_requests(records: List[Dict[str, Any]]) -> List[FriendRequestRead]:
    senders = await UserService.ids_to_usernames(r["from_id"] for r in records)
    recipients = await UserService.ids_to_usernames(r["to_id"] for r in records)
    return [
        FriendRequestRead(
            id=r["id"],
            sender=sender,
            recipient=recipient,
            status=r["status"],
            created_at=r["created_at"],
        )
        for r, sender, recipient in zip(records, senders, recipients)
    ]
