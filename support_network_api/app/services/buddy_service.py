"""
Buddy matching across communities.

Finding a buddy opts the requester in to matching, then walks the
requester's communities (oldest community first) and each community's
members (in join order).  The first member other than the requester who
is opted in and not yet matched with the requester becomes the buddy:
a match is recorded, a chat between the two is started (or the
existing one reused) and the search stops.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..schemas.chat import ChatRead
from ..schemas.match import MatchRead
from .chat_service import ChatService
from .labeling_service import community_members
from .matching_service import EntityAlreadyOptedInError, MatchingService


logger = logging.getLogger(__name__)


@dataclass
class BuddyMatch:
    buddy_id: int
    match: MatchRead
    chat: ChatRead


class BuddyService:

    @classmethod
    async def find_buddy(cls, user_id: int) -> Optional[BuddyMatch]:
        """Match ``user_id`` with the first eligible peer, or return ``None``."""
        if not await MatchingService.check_if_matchable(user_id):
            try:
                await MatchingService.opt_in(user_id)
            except EntityAlreadyOptedInError:
                # A concurrent request opted the user in first.
                pass

        for community in await community_members.get_item_labels(user_id):
            for member in await community_members.find_items_by_label(community):
                if member == user_id:
                    continue
                if not await MatchingService.check_if_matchable(member):
                    continue
                if await MatchingService.check_if_matched(user_id, member):
                    continue
                match = await MatchingService.create_match(user_id, member)
                chat = await ChatService.get_or_start_chat(user_id, member)
                logger.info("Buddy match for %s in %s: %s", user_id, community, member)
                return BuddyMatch(buddy_id=member, match=match, chat=chat)

        logger.info("No buddy found for %s", user_id)
        return None
