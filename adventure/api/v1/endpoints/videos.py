import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from adventure.api.dependencies import get_current_creator
from adventure.exceptions import ValidationError
from adventure.models.user import User
from adventure.models.video import VideoResponse
from adventure.services.storage_service import VIDEO_FIELD, storage_service
from adventure.services.video_service import video_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/upload", response_model=VideoResponse, status_code=status.HTTP_201_CREATED)
async def upload_video(
    title: Optional[str] = Form(None),
    genre: Optional[str] = Form(None),
    tone: Optional[str] = Form(None),
    video: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_creator),
):
    """Upload a video file with its matching attributes"""
    if not title or not genre or not tone or video is None:
        raise ValidationError("Title, genre, tone, and video file are required")

    video_path = await storage_service.save_upload(VIDEO_FIELD, video)
    created = await video_service.create_video(title, genre, tone, video_path, current_user.id)
    return VideoResponse.from_video(created, current_user.name)


@router.get("/my-videos", response_model=List[VideoResponse])
async def get_my_videos(current_user: User = Depends(get_current_creator)):
    """Get the creator's videos, newest first"""
    videos = await video_service.get_videos_for_creator(current_user.id)
    return [VideoResponse.from_video(video, current_user.name) for video in videos]
