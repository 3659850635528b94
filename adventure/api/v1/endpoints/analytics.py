from fastapi import APIRouter, Depends
from pydantic import BaseModel

from adventure.api.dependencies import get_current_creator, get_current_marketer
from adventure.models.user import User
from adventure.services.analytics_service import analytics_service

router = APIRouter()


class CreatorAnalyticsResponse(BaseModel):
    total_videos: int
    pending_matches: int
    accepted_matches: int
    rejected_matches: int


class MarketerAnalyticsResponse(BaseModel):
    total_campaigns: int
    total_matches: int
    accepted_matches: int
    rejected_matches: int


@router.get("/creator", response_model=CreatorAnalyticsResponse)
async def get_creator_analytics(current_user: User = Depends(get_current_creator)):
    return CreatorAnalyticsResponse(**await analytics_service.get_creator_analytics(current_user.id))


@router.get("/marketer", response_model=MarketerAnalyticsResponse)
async def get_marketer_analytics(current_user: User = Depends(get_current_marketer)):
    return MarketerAnalyticsResponse(**await analytics_service.get_marketer_analytics(current_user.id))
