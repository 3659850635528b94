"""
Dashboard counters for creators and marketers
"""

import logging
from typing import Dict

from adventure.db.mongodb import mongodb
from adventure.models.status_enums import MatchStatus
from adventure.services.campaign_service import campaign_service
from adventure.services.video_service import video_service

logger = logging.getLogger(__name__)


class AnalyticsService:

    async def get_creator_analytics(self, creator_id: str) -> Dict[str, int]:
        db = mongodb.get_database()

        total_videos = await video_service.count_videos_for_creator(creator_id)
        video_ids = await video_service.get_video_ids_for_creator(creator_id)
        by_video = {"video_id": {"$in": video_ids}}

        return {
            "total_videos": total_videos,
            "pending_matches": await db.matches.count_documents({**by_video, "status": MatchStatus.PENDING.value}),
            "accepted_matches": await db.matches.count_documents({**by_video, "status": MatchStatus.ACCEPTED.value}),
            "rejected_matches": await db.matches.count_documents({**by_video, "status": MatchStatus.REJECTED.value}),
        }

    async def get_marketer_analytics(self, marketer_id: str) -> Dict[str, int]:
        db = mongodb.get_database()

        total_campaigns = await campaign_service.count_campaigns_for_marketer(marketer_id)
        campaign_ids = await campaign_service.get_campaign_ids_for_marketer(marketer_id)
        by_campaign = {"campaign_id": {"$in": campaign_ids}}

        return {
            "total_campaigns": total_campaigns,
            "total_matches": await db.matches.count_documents(by_campaign),
            "accepted_matches": await db.matches.count_documents(
                {**by_campaign, "status": MatchStatus.ACCEPTED.value}
            ),
            "rejected_matches": await db.matches.count_documents(
                {**by_campaign, "status": MatchStatus.REJECTED.value}
            ),
        }


analytics_service = AnalyticsService()
