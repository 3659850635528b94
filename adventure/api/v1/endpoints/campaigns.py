import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from adventure.api.dependencies import get_current_marketer
from adventure.exceptions import ValidationError
from adventure.models.campaign import CampaignResponse
from adventure.models.user import User
from adventure.services.campaign_service import campaign_service
from adventure.services.storage_service import ASSET_FIELD, storage_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/create", response_model=CampaignResponse, status_code=status.HTTP_201_CREATED)
async def create_campaign(
    product_name: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    asset: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_marketer),
):
    """Create a campaign with its creative asset"""
    if not product_name or not category or asset is None:
        raise ValidationError("Product name, category, and asset file are required")

    asset_path = await storage_service.save_upload(ASSET_FIELD, asset)
    campaign = await campaign_service.create_campaign(
        product_name, category, description, asset_path, current_user.id
    )
    return CampaignResponse.from_campaign(campaign, current_user.name)


@router.get("/my-campaigns", response_model=List[CampaignResponse])
async def get_my_campaigns(current_user: User = Depends(get_current_marketer)):
    """Get the marketer's campaigns, newest first"""
    campaigns = await campaign_service.get_campaigns_for_marketer(current_user.id)
    return [CampaignResponse.from_campaign(campaign, current_user.name) for campaign in campaigns]
