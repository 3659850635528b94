from datetime import datetime, UTC
from typing import Optional
from pydantic import BaseModel, Field


class LLMCost(BaseModel):
    """Model for tracking LLM costs"""

    id: Optional[str] = Field(None, alias="_id")
    purpose: str = Field(..., description="What the call was made for: match or chat")
    prompt_tokens: int = Field(..., description="Number of tokens in prompt")
    completion_tokens: int = Field(..., description="Number of tokens in completion")
    total_tokens: int = Field(..., description="Total tokens used")
    cost_usd: float = Field(..., description="Cost in USD")
    model_name: str = Field(..., description="LLM model used")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda v: v.isoformat()
        }
