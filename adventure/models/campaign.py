from datetime import datetime, UTC
from typing import Optional

from pydantic import BaseModel, Field


class CampaignRef(BaseModel):
    """Campaign attributes that matching looks at"""

    product_name: str
    category: str
    description: Optional[str] = None


class Campaign(CampaignRef):
    """Advertising campaign owned by a marketer"""

    id: Optional[str] = None
    asset_path: str
    marketer_id: str

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class CampaignResponse(BaseModel):
    """Response model for a campaign"""

    id: str
    product_name: str
    category: str
    description: Optional[str] = None
    asset_path: str
    marketer_id: str
    marketer_name: str = "Unknown"
    created_at: datetime

    @classmethod
    def from_campaign(cls, campaign: Campaign, marketer_name: Optional[str] = None) -> "CampaignResponse":
        return cls(
            id=campaign.id or "",
            product_name=campaign.product_name,
            category=campaign.category,
            description=campaign.description,
            asset_path=campaign.asset_path,
            marketer_id=campaign.marketer_id,
            marketer_name=marketer_name or "Unknown",
            created_at=campaign.created_at,
        )
