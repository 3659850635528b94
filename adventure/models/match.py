"""
Models for scored pairings between videos and campaigns
"""

from datetime import datetime, UTC
from typing import Optional, Union

from pydantic import BaseModel, Field

from adventure.models.campaign import CampaignResponse
from adventure.models.status_enums import MatchStatus
from adventure.models.video import VideoResponse


class MatchResult(BaseModel):
    """Compatibility score and the explanation behind it"""

    # Scores from the LLM are stored as returned, so floats and out-of-range
    # values are possible here. The fallback scorer always yields 0..100 ints.
    score: Union[int, float]
    reasoning: str = ""


class MatchRecord(BaseModel):
    """Stored match between one video and one campaign"""

    id: Optional[str] = None
    video_id: str
    campaign_id: str
    match_score: Union[int, float]
    reasoning: str = ""
    status: MatchStatus = MatchStatus.PENDING

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    class Config:
        use_enum_values = True
        validate_default = True


class MatchDetail(BaseModel):
    """Match as returned by the API, with both sides populated"""

    id: str
    video_id: str
    campaign_id: str
    match_score: Union[int, float]
    reasoning: str
    status: str
    video: Optional[VideoResponse] = None
    campaign: Optional[CampaignResponse] = None
    created_at: datetime
