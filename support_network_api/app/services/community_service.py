"""
Communities, composed from three labeling instances.

A community named ``N`` is a label ``N`` in ``community_members``
(items are user ids) together with a label ``N`` in ``community_posts``
(items are post ids).  Common symptoms of a community are kept in the
``community_symptoms`` namespace, where the label is the community name
and the items are normalised symptom strings.
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.db import get_cursor
from ..schemas.post import PostOptions
from .labeling_service import (
    LabelNotFoundError,
    community_members,
    community_posts,
    community_symptoms,
    normalize_symptom,
)
from .post_service import PostService


logger = logging.getLogger(__name__)


class CommunityService:
    """Cross‑concept operations on communities."""

    @classmethod
    async def create_community(cls, creator_id: int, name: str) -> None:
        """Create both labels of the community and make the creator its first member."""
        with get_cursor() as cursor:
            # One transaction: either both labels and the membership exist or none do.
            community_members.insert_label(cursor, name)
            community_posts.insert_label(cursor, name)
            community_members.insert_item(cursor, creator_id, name)
        logger.info("User %s created community %s", creator_id, name)

    @classmethod
    async def join(cls, user_id: int, name: str) -> None:
        await community_members.affix_label(user_id, name)

    @classmethod
    async def leave(cls, user_id: int, name: str) -> None:
        await community_members.remove_label(user_id, name)

    @classmethod
    async def get_members(cls, name: str) -> List[int]:
        return await community_members.find_items_by_label(name)

    @classmethod
    async def get_post_ids(cls, name: str) -> List[int]:
        return await community_posts.find_items_by_label(name)

    @classmethod
    async def get_user_communities(cls, user_id: int) -> List[str]:
        return await community_members.get_item_labels(user_id)

    @classmethod
    async def list_communities(cls) -> List[str]:
        return [label.name for label in await community_members.list_labels()]

    @classmethod
    async def publish_post(
        cls,
        author_id: int,
        content: str,
        community: Optional[str] = None,
        options: Optional[PostOptions] = None,
    ) -> Dict[str, Any]:
        """Create a post, attaching it to ``community`` when one is given.

        The community is checked before the post is written so that a
        bad community name leaves no orphan post behind.
        """
        if community is not None and not await community_posts.label_exists(community):
            raise LabelNotFoundError(community)
        post = await PostService.create_post(author_id, content, options)
        if community is not None:
            await community_posts.affix_label(post["id"], community)
        return post

    @classmethod
    async def add_common_symptom(cls, community: str, symptom: str) -> None:
        normalize_symptom(symptom)
        if not await community_members.label_exists(community):
            raise LabelNotFoundError(community)
        if not await community_symptoms.label_exists(community):
            await community_symptoms.create_label(community)
        await community_symptoms.affix_label(symptom, community)
        logger.info("Symptom %r added to community %s", symptom, community)

    @classmethod
    async def get_common_symptoms(cls, community: str) -> List[str]:
        if not await community_symptoms.label_exists(community):
            if not await community_members.label_exists(community):
                raise LabelNotFoundError(community)
            return []
        return await community_symptoms.find_items_by_label(community)

    @classmethod
    async def search_by_symptom(cls, symptom: str) -> List[str]:
        """Return the communities listing ``symptom`` among their common symptoms."""
        return await community_symptoms.get_item_labels(symptom)
