from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from adventure.api.dependencies import get_current_user
from adventure.models.match import MatchDetail
from adventure.models.user import User
from adventure.services import get_match_service
from adventure.services.match_service import MatchService

router = APIRouter()


class FindMatchesRequest(BaseModel):
    video_id: Optional[str] = None
    campaign_id: Optional[str] = None


@router.post("/find-matches", response_model=List[MatchDetail])
async def find_matches(
    request: FindMatchesRequest,
    current_user: User = Depends(get_current_user),
    service: MatchService = Depends(get_match_service),
):
    """Score a video against every campaign, or a campaign against every video.

    Pairs scored earlier are returned as stored. Results are ordered by score,
    highest first.
    """
    return await service.find_matches(current_user, video_id=request.video_id, campaign_id=request.campaign_id)
