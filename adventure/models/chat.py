from datetime import datetime, UTC
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from adventure.models.status_enums import ChatSender


class Chat(BaseModel):
    """Conversation between a marketer and the assistant"""

    id: Optional[str] = None
    title: str
    marketer_id: str
    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ChatMessage(BaseModel):
    """Single message inside a chat"""

    id: Optional[str] = None
    chat_id: str
    content: str
    sender: ChatSender
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    class Config:
        use_enum_values = True
