"""
Service for generating and managing video/campaign matches.

``find_matches`` pairs a target video (or campaign) with every counterpart,
reusing stored matches and scoring only the missing pairs.
"""

import logging
from typing import List, Optional, Tuple

from pymongo.errors import DuplicateKeyError

from adventure.db.mongodb import mongodb
from adventure.exceptions import ForbiddenError, NotFoundError, ValidationError
from adventure.models.campaign import Campaign, CampaignResponse
from adventure.models.match import MatchDetail, MatchRecord
from adventure.models.status_enums import MatchStatus, UserRole, VideoStatus
from adventure.models.user import User
from adventure.models.video import Video, VideoResponse
from adventure.services.campaign_service import CampaignService, campaign_service as default_campaign_service
from adventure.services.match_generation_service import (
    MatchGenerationService,
    match_generation_service as default_match_generation_service,
)
from adventure.services.user_service import UserService, user_service as default_user_service
from adventure.services.video_service import VideoService, video_service as default_video_service
from adventure.utils.object_id_utils import to_object_id, with_str_id

logger = logging.getLogger(__name__)

MatchTriple = Tuple[MatchRecord, Optional[Video], Optional[Campaign]]


class MatchService:
    """Service for video/campaign matches"""

    def __init__(
        self,
        generator: Optional[MatchGenerationService] = None,
        videos: Optional[VideoService] = None,
        campaigns: Optional[CampaignService] = None,
        users: Optional[UserService] = None,
    ):
        self.generator = generator or default_match_generation_service
        self.videos = videos or default_video_service
        self.campaigns = campaigns or default_campaign_service
        self.users = users or default_user_service

    async def find_matches(
        self, actor: User, video_id: Optional[str] = None, campaign_id: Optional[str] = None
    ) -> List[MatchDetail]:
        """Generate (or reuse) matches for a video and/or a campaign.

        Results are sorted by score, highest first. Pairs with equal scores
        keep the order in which they were visited.
        """
        if not video_id and not campaign_id:
            raise ValidationError("Either video_id or campaign_id is required")

        triples: List[MatchTriple] = []
        if video_id:
            triples.extend(await self._matches_for_video(video_id, actor))
        if campaign_id:
            triples.extend(await self._matches_for_campaign(campaign_id, actor))

        triples.sort(key=lambda triple: triple[0].match_score, reverse=True)

        logger.info("Returning %d matches for video=%s campaign=%s", len(triples), video_id, campaign_id)
        return await self._to_details(triples)

    async def _matches_for_video(self, video_id: str, actor: User) -> List[MatchTriple]:
        video = await self.videos.get_video_by_id(video_id)
        if video is None:
            raise NotFoundError("Video not found")

        if actor.role == UserRole.CREATOR.value and video.creator_id != actor.id:
            raise ForbiddenError("Unauthorized")

        triples = []
        for campaign in await self.campaigns.get_all_campaigns():
            record = await self._get_or_create_match(video, campaign)
            triples.append((record, video, campaign))
        return triples

    async def _matches_for_campaign(self, campaign_id: str, actor: User) -> List[MatchTriple]:
        campaign = await self.campaigns.get_campaign_by_id(campaign_id)
        if campaign is None:
            raise NotFoundError("Campaign not found")

        if actor.role == UserRole.MARKETER.value and campaign.marketer_id != actor.id:
            raise ForbiddenError("Unauthorized")

        triples = []
        for video in await self.videos.get_all_videos():
            record = await self._get_or_create_match(video, campaign)
            triples.append((record, video, campaign))
        return triples

    async def _get_or_create_match(self, video: Video, campaign: Campaign) -> MatchRecord:
        """Return the stored match for the pair, scoring and storing it first if needed"""
        existing = await self.get_match_for_pair(video.id, campaign.id)
        if existing is not None:
            return existing

        result = await self.generator.generate(video, campaign)
        record = MatchRecord(
            video_id=video.id,
            campaign_id=campaign.id,
            match_score=result.score,
            reasoning=result.reasoning,
        )

        db = mongodb.get_database()
        try:
            insert_result = await db.matches.insert_one(record.model_dump(exclude={"id"}))
        except DuplicateKeyError:
            # Another request stored this pair between our lookup and insert
            logger.info("Match for video %s and campaign %s already exists, reusing it", video.id, campaign.id)
            existing = await self.get_match_for_pair(video.id, campaign.id)
            if existing is None:
                raise
            return existing

        record.id = str(insert_result.inserted_id)
        await self.videos.set_status(video.id, VideoStatus.MATCHED)
        video.status = VideoStatus.MATCHED.value

        logger.info(
            "Created match %s (video %s, campaign %s, score %s)", record.id, video.id, campaign.id, record.match_score
        )
        return record

    async def get_match_for_pair(self, video_id: str, campaign_id: str) -> Optional[MatchRecord]:
        db = mongodb.get_database()
        match_doc = await db.matches.find_one({"video_id": video_id, "campaign_id": campaign_id})
        return MatchRecord(**with_str_id(match_doc)) if match_doc else None

    async def get_match_by_id(self, match_id: str) -> Optional[MatchRecord]:
        object_id = to_object_id(match_id)
        if object_id is None:
            return None

        db = mongodb.get_database()
        match_doc = await db.matches.find_one({"_id": object_id})
        return MatchRecord(**with_str_id(match_doc)) if match_doc else None

    async def get_creator_matches(self, actor: User) -> List[MatchDetail]:
        """Matches for all of the creator's videos, newest first"""
        video_ids = await self.videos.get_video_ids_for_creator(actor.id)
        if not video_ids:
            return []

        db = mongodb.get_database()
        cursor = db.matches.find({"video_id": {"$in": video_ids}}).sort("created_at", -1)
        records = [MatchRecord(**with_str_id(doc)) async for doc in cursor]
        return await self._populate(records)

    async def get_campaign_matches(self, actor: User, campaign_id: str) -> List[MatchDetail]:
        """Matches for one of the marketer's campaigns, newest first"""
        campaign = await self.campaigns.get_campaign_by_id(campaign_id)
        if campaign is None or campaign.marketer_id != actor.id:
            raise NotFoundError("Campaign not found")

        db = mongodb.get_database()
        cursor = db.matches.find({"campaign_id": campaign.id}).sort("created_at", -1)
        records = [MatchRecord(**with_str_id(doc)) async for doc in cursor]
        return await self._populate(records)

    async def accept_match(self, actor: User, match_id: str) -> MatchDetail:
        record, video = await self._get_owned_match(actor, match_id)
        record = await self._set_status(record, MatchStatus.ACCEPTED)
        await self.videos.set_status(video.id, VideoStatus.APPROVED)
        video.status = VideoStatus.APPROVED.value

        logger.info("Match %s accepted by creator %s", record.id, actor.id)
        campaign = await self.campaigns.get_campaign_by_id(record.campaign_id)
        return (await self._to_details([(record, video, campaign)]))[0]

    async def reject_match(self, actor: User, match_id: str) -> MatchDetail:
        record, video = await self._get_owned_match(actor, match_id)
        record = await self._set_status(record, MatchStatus.REJECTED)

        logger.info("Match %s rejected by creator %s", record.id, actor.id)
        campaign = await self.campaigns.get_campaign_by_id(record.campaign_id)
        return (await self._to_details([(record, video, campaign)]))[0]

    async def _get_owned_match(self, actor: User, match_id: str) -> Tuple[MatchRecord, Video]:
        record = await self.get_match_by_id(match_id)
        if record is None:
            raise NotFoundError("Match not found")

        video = await self.videos.get_video_by_id(record.video_id)
        if video is None or video.creator_id != actor.id:
            raise ForbiddenError("Unauthorized")
        return record, video

    async def _set_status(self, record: MatchRecord, status: MatchStatus) -> MatchRecord:
        db = mongodb.get_database()
        now = mongodb.get_current_time()
        await db.matches.update_one(
            {"_id": to_object_id(record.id)},
            {"$set": {"status": status.value, "updated_at": now}},
        )
        return record.model_copy(update={"status": status.value, "updated_at": now})

    async def _populate(self, records: List[MatchRecord]) -> List[MatchDetail]:
        """Attach videos and campaigns to stored matches"""
        videos = await self.videos.get_videos_by_ids(r.video_id for r in records)
        campaigns = await self.campaigns.get_campaigns_by_ids(r.campaign_id for r in records)
        return await self._to_details(
            [(r, videos.get(r.video_id), campaigns.get(r.campaign_id)) for r in records]
        )

    async def _to_details(self, triples: List[MatchTriple]) -> List[MatchDetail]:
        owner_ids = set()
        for _, video, campaign in triples:
            if video is not None:
                owner_ids.add(video.creator_id)
            if campaign is not None:
                owner_ids.add(campaign.marketer_id)
        names = await self.users.get_names(owner_ids)

        details = []
        for record, video, campaign in triples:
            details.append(
                MatchDetail(
                    id=record.id or "",
                    video_id=record.video_id,
                    campaign_id=record.campaign_id,
                    match_score=record.match_score,
                    reasoning=record.reasoning,
                    status=record.status,
                    video=VideoResponse.from_video(video, names.get(video.creator_id)) if video else None,
                    campaign=(
                        CampaignResponse.from_campaign(campaign, names.get(campaign.marketer_id))
                        if campaign
                        else None
                    ),
                    created_at=record.created_at,
                )
            )
        return details


match_service = MatchService()
