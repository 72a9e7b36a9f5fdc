"""
Matching endpoints for API v1.

``POST /match`` runs the buddy search for the caller; see
``BuddyService.find_buddy`` for the selection order.
"""

from typing import List

from fastapi import APIRouter, Depends

from support_network_api.app.core.security import get_current_user
from support_network_api.app.schemas.match import BuddyMatchResult
from support_network_api.app.services.buddy_service import BuddyService
from support_network_api.app.services.matching_service import MatchingService
from support_network_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/matches/optin")
async def opt_in_to_match(current_user: dict = Depends(get_current_user)) -> dict:
    await MatchingService.opt_in(current_user["user_id"])
    return {"msg": "Successfully opted in to matching!"}


@router.delete("/matches/optout")
async def opt_out_of_match(current_user: dict = Depends(get_current_user)) -> dict:
    await MatchingService.opt_out(current_user["user_id"])
    return {"msg": "Successfully opted out of matching!"}


@router.get("/matches/status")
async def get_match_status(current_user: dict = Depends(get_current_user)) -> dict:
    return {"matchable": await MatchingService.check_if_matchable(current_user["user_id"])}


@router.get("/matches", response_model=List[str])
async def get_matches(current_user: dict = Depends(get_current_user)) -> List[str]:
    """Usernames of the caller's buddies, oldest match first."""
    user_id = current_user["user_id"]
    matches = await MatchingService.get_matches(user_id)
    peers = [m.entity2 if m.entity1 == user_id else m.entity1 for m in matches]
    return await UserService.ids_to_usernames(peers)


@router.post("/match", response_model=BuddyMatchResult)
async def match_buddy(current_user: dict = Depends(get_current_user)) -> BuddyMatchResult:
    found = await BuddyService.find_buddy(current_user["user_id"])
    if found is None:
        return BuddyMatchResult(msg="No matches found.")
    buddy = (await UserService.ids_to_usernames([found.buddy_id]))[0]
    return BuddyMatchResult(msg="Matched with {0}!".format(buddy), buddy=buddy, match=found.match)
