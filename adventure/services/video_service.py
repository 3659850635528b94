"""
Service for creator videos
"""

import logging
from typing import Dict, Iterable, List, Optional

from adventure.db.mongodb import mongodb
from adventure.exceptions import ValidationError
from adventure.models.status_enums import VideoStatus
from adventure.models.video import Video
from adventure.utils.object_id_utils import to_object_id, with_str_id

logger = logging.getLogger(__name__)


class VideoService:
    """Service for storing and listing videos"""

    async def create_video(self, title: str, genre: str, tone: str, video_path: str, creator_id: str) -> Video:
        if not title or not genre or not tone or not video_path:
            raise ValidationError("Title, genre, tone, and video file are required")

        db = mongodb.get_database()
        video = Video(title=title, genre=genre, tone=tone, video_path=video_path, creator_id=creator_id)
        result = await db.videos.insert_one(video.model_dump(exclude={"id"}))
        video.id = str(result.inserted_id)

        logger.info("Video %s uploaded by creator %s", video.id, creator_id)
        return video

    async def get_video_by_id(self, video_id: str) -> Optional[Video]:
        object_id = to_object_id(video_id)
        if object_id is None:
            return None

        db = mongodb.get_database()
        video_doc = await db.videos.find_one({"_id": object_id})
        return Video(**with_str_id(video_doc)) if video_doc else None

    async def get_videos_by_ids(self, video_ids: Iterable[str]) -> Dict[str, Video]:
        object_ids = [oid for oid in (to_object_id(vid) for vid in set(video_ids)) if oid is not None]
        if not object_ids:
            return {}

        db = mongodb.get_database()
        videos = {}
        async for doc in db.videos.find({"_id": {"$in": object_ids}}):
            video = Video(**with_str_id(doc))
            videos[video.id] = video
        return videos

    async def get_all_videos(self) -> List[Video]:
        """All videos in natural order"""
        db = mongodb.get_database()
        return [Video(**with_str_id(doc)) async for doc in db.videos.find({})]

    async def get_videos_for_creator(self, creator_id: str) -> List[Video]:
        """Creator's videos, newest first"""
        db = mongodb.get_database()
        cursor = db.videos.find({"creator_id": creator_id}).sort("created_at", -1)
        return [Video(**with_str_id(doc)) async for doc in cursor]

    async def get_video_ids_for_creator(self, creator_id: str) -> List[str]:
        db = mongodb.get_database()
        return [str(doc["_id"]) async for doc in db.videos.find({"creator_id": creator_id}, {"_id": 1})]

    async def count_videos_for_creator(self, creator_id: str) -> int:
        db = mongodb.get_database()
        return await db.videos.count_documents({"creator_id": creator_id})

    async def set_status(self, video_id: str, status: VideoStatus) -> bool:
        object_id = to_object_id(video_id)
        if object_id is None:
            return False

        db = mongodb.get_database()
        result = await db.videos.update_one(
            {"_id": object_id},
            {"$set": {"status": status.value, "updated_at": mongodb.get_current_time()}},
        )
        return bool(result.matched_count > 0)


video_service = VideoService()
