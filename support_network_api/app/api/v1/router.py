"""
Top‑level router for version 1 of the API.

This router aggregates the per‑concept routers.  Routers whose paths
span several prefixes (session, friends, matching) define full paths
internally and are included without a prefix.
"""

from fastapi import APIRouter

from .endpoints import (
    session,
    users,
    posts,
    comments,
    friends,
    communities,
    groups,
    matches,
    chats,
)

router = APIRouter()

router.include_router(session.router, tags=["session"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(posts.router, prefix="/posts", tags=["posts"])
router.include_router(comments.router, prefix="/comments", tags=["comments"])
router.include_router(friends.router, tags=["friends"])
router.include_router(communities.router, prefix="/communities", tags=["communities"])
router.include_router(groups.router, prefix="/groups", tags=["groups"])
router.include_router(matches.router, tags=["matches"])
router.include_router(chats.router, prefix="/chats", tags=["chats"])
