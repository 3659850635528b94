"""
API endpoints for reviewing generated matches
"""

from typing import List

from fastapi import APIRouter, Depends

from adventure.api.dependencies import get_current_creator, get_current_marketer
from adventure.models.match import MatchDetail
from adventure.models.user import User
from adventure.services import get_match_service
from adventure.services.match_service import MatchService

router = APIRouter()


@router.get("/my-matches", response_model=List[MatchDetail])
async def get_my_matches(
    current_user: User = Depends(get_current_creator),
    service: MatchService = Depends(get_match_service),
):
    """Get matches for all of the creator's videos"""
    return await service.get_creator_matches(current_user)


@router.get("/campaign/{campaign_id}", response_model=List[MatchDetail])
async def get_campaign_matches(
    campaign_id: str,
    current_user: User = Depends(get_current_marketer),
    service: MatchService = Depends(get_match_service),
):
    """Get matches for one of the marketer's campaigns"""
    return await service.get_campaign_matches(current_user, campaign_id)


@router.put("/{match_id}/accept", response_model=MatchDetail)
async def accept_match(
    match_id: str,
    current_user: User = Depends(get_current_creator),
    service: MatchService = Depends(get_match_service),
):
    return await service.accept_match(current_user, match_id)


@router.put("/{match_id}/reject", response_model=MatchDetail)
async def reject_match(
    match_id: str,
    current_user: User = Depends(get_current_creator),
    service: MatchService = Depends(get_match_service),
):
    return await service.reject_match(current_user, match_id)
