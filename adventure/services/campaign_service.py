"""
Service for marketer campaigns
"""

import logging
from typing import Dict, Iterable, List, Optional

from adventure.db.mongodb import mongodb
from adventure.exceptions import ValidationError
from adventure.models.campaign import Campaign
from adventure.utils.object_id_utils import to_object_id, with_str_id

logger = logging.getLogger(__name__)


class CampaignService:
    """Service for storing and listing campaigns"""

    async def create_campaign(
        self,
        product_name: str,
        category: str,
        description: Optional[str],
        asset_path: str,
        marketer_id: str,
    ) -> Campaign:
        if not product_name or not category or not asset_path:
            raise ValidationError("Product name, category, and asset file are required")

        db = mongodb.get_database()
        campaign = Campaign(
            product_name=product_name,
            category=category,
            description=description,
            asset_path=asset_path,
            marketer_id=marketer_id,
        )
        result = await db.campaigns.insert_one(campaign.model_dump(exclude={"id"}))
        campaign.id = str(result.inserted_id)

        logger.info("Campaign %s created by marketer %s", campaign.id, marketer_id)
        return campaign

    async def get_campaign_by_id(self, campaign_id: str) -> Optional[Campaign]:
        object_id = to_object_id(campaign_id)
        if object_id is None:
            return None

        db = mongodb.get_database()
        campaign_doc = await db.campaigns.find_one({"_id": object_id})
        return Campaign(**with_str_id(campaign_doc)) if campaign_doc else None

    async def get_campaigns_by_ids(self, campaign_ids: Iterable[str]) -> Dict[str, Campaign]:
        object_ids = [oid for oid in (to_object_id(cid) for cid in set(campaign_ids)) if oid is not None]
        if not object_ids:
            return {}

        db = mongodb.get_database()
        campaigns = {}
        async for doc in db.campaigns.find({"_id": {"$in": object_ids}}):
            campaign = Campaign(**with_str_id(doc))
            campaigns[campaign.id] = campaign
        return campaigns

    async def get_all_campaigns(self) -> List[Campaign]:
        """All campaigns in natural order"""
        db = mongodb.get_database()
        return [Campaign(**with_str_id(doc)) async for doc in db.campaigns.find({})]

    async def get_campaigns_for_marketer(self, marketer_id: str) -> List[Campaign]:
        """Marketer's campaigns, newest first"""
        db = mongodb.get_database()
        cursor = db.campaigns.find({"marketer_id": marketer_id}).sort("created_at", -1)
        return [Campaign(**with_str_id(doc)) async for doc in cursor]

    async def get_campaign_ids_for_marketer(self, marketer_id: str) -> List[str]:
        db = mongodb.get_database()
        return [str(doc["_id"]) async for doc in db.campaigns.find({"marketer_id": marketer_id}, {"_id": 1})]

    async def count_campaigns_for_marketer(self, marketer_id: str) -> int:
        db = mongodb.get_database()
        return await db.campaigns.count_documents({"marketer_id": marketer_id})


campaign_service = CampaignService()
