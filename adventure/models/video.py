from datetime import datetime, UTC
from typing import Optional

from pydantic import BaseModel, Field

from adventure.models.status_enums import VideoStatus


class VideoRef(BaseModel):
    """Video attributes that matching looks at"""

    title: str
    genre: str
    tone: str


class Video(VideoRef):
    """Uploaded video owned by a creator"""

    id: Optional[str] = None
    video_path: str
    creator_id: str
    status: VideoStatus = VideoStatus.UPLOADED

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    class Config:
        use_enum_values = True
        validate_default = True


class VideoResponse(BaseModel):
    """Response model for a video"""

    id: str
    title: str
    genre: str
    tone: str
    video_path: str
    creator_id: str
    creator_name: str = "Unknown"
    status: str
    created_at: datetime

    @classmethod
    def from_video(cls, video: Video, creator_name: Optional[str] = None) -> "VideoResponse":
        return cls(
            id=video.id or "",
            title=video.title,
            genre=video.genre,
            tone=video.tone,
            video_path=video.video_path,
            creator_id=video.creator_id,
            creator_name=creator_name or "Unknown",
            status=video.status,
            created_at=video.created_at,
        )
