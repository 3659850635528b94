"""
Chat assistant for marketers.

Each user message is answered by the LLM with the marketer's campaigns and
all uploaded videos as context.
"""

import asyncio
import logging
from typing import List, Optional, Tuple

from adventure.core.config import settings
from adventure.db.mongodb import mongodb
from adventure.exceptions import NotFoundError, ValidationError
from adventure.models.campaign import Campaign
from adventure.models.chat import Chat, ChatMessage
from adventure.models.status_enums import ChatSender
from adventure.models.video import Video
from adventure.services.campaign_service import campaign_service
from adventure.services.llm_service import LLMService, llm_service as default_llm_service
from adventure.services.user_service import user_service
from adventure.services.video_service import video_service
from adventure.utils.object_id_utils import to_object_id, with_str_id

logger = logging.getLogger(__name__)

CHAT_SYSTEM_PROMPT = (
    "You are an AI assistant for AdVenture, an advertising platform that matches "
    "video creators with marketing campaigns."
)
CHAT_ERROR_REPLY = "I'm sorry, I'm having trouble processing your request right now. Please try again later."


def build_chat_prompt(user_message: str, campaigns: List[Campaign], videos: List[Tuple[Video, str]]) -> str:
    """Create the assistant prompt from the question and the marketplace data"""
    campaign_lines = "\n".join(f"- {c.product_name} ({c.category}): {c.description or ''}" for c in campaigns)
    video_lines = "\n".join(f'- "{v.title}" ({v.genre}, {v.tone}) by {creator}' for v, creator in videos)

    return f"""{CHAT_SYSTEM_PROMPT}

User Query: "{user_message}"

Available Campaigns:
{campaign_lines}

Available Videos:
{video_lines}

Please provide a helpful response about campaigns, videos, or matching strategies. Keep it conversational and informative.
If the user is asking about specific campaigns or videos, reference the data provided.

Respond in a friendly, professional tone as an AI marketing assistant."""


class ChatService:
    """Service for marketer chats with the AI assistant"""

    def __init__(self, llm: Optional[LLMService] = None):
        self.llm = llm or default_llm_service

    async def create_chat(self, marketer_id: str, title: str) -> Chat:
        if not title:
            raise ValidationError("Chat title is required")

        db = mongodb.get_database()
        chat = Chat(title=title, marketer_id=marketer_id)
        result = await db.chats.insert_one(chat.model_dump(exclude={"id"}))
        chat.id = str(result.inserted_id)

        logger.info("Chat %s created for marketer %s", chat.id, marketer_id)
        return chat

    async def get_chats(self, marketer_id: str) -> List[Chat]:
        db = mongodb.get_database()
        cursor = db.chats.find({"marketer_id": marketer_id}).sort("created_at", -1)
        return [Chat(**with_str_id(doc)) async for doc in cursor]

    async def get_owned_chat(self, marketer_id: str, chat_id: str) -> Chat:
        object_id = to_object_id(chat_id)
        db = mongodb.get_database()
        chat_doc = await db.chats.find_one({"_id": object_id, "marketer_id": marketer_id}) if object_id else None
        if not chat_doc:
            raise NotFoundError("Chat not found")
        return Chat(**with_str_id(chat_doc))

    async def get_messages(self, marketer_id: str, chat_id: str) -> List[ChatMessage]:
        chat = await self.get_owned_chat(marketer_id, chat_id)

        db = mongodb.get_database()
        cursor = db.chat_messages.find({"chat_id": chat.id}).sort("created_at", 1)
        return [ChatMessage(**with_str_id(doc)) async for doc in cursor]

    async def send_message(self, marketer_id: str, chat_id: str, content: str) -> Tuple[ChatMessage, ChatMessage]:
        """Store the user's message and the assistant's reply"""
        if not content:
            raise ValidationError("Message content is required")

        chat = await self.get_owned_chat(marketer_id, chat_id)
        user_message = await self._save_message(chat.id, content, ChatSender.USER)

        campaigns = await campaign_service.get_campaigns_for_marketer(marketer_id)
        videos = await video_service.get_all_videos()
        creator_names = await user_service.get_names(v.creator_id for v in videos)
        reply = await self.answer(
            content, campaigns, [(v, creator_names.get(v.creator_id, "Unknown")) for v in videos]
        )

        ai_message = await self._save_message(chat.id, reply, ChatSender.AI)
        logger.info("Chat %s: stored user message and AI reply", chat.id)
        return user_message, ai_message

    async def answer(self, user_message: str, campaigns: List[Campaign], videos: List[Tuple[Video, str]]) -> str:
        """Ask the LLM; any failure becomes a fixed apology"""
        logger.info("Processing chat query with %d campaigns and %d videos", len(campaigns), len(videos))
        try:
            prompt = build_chat_prompt(user_message, campaigns, videos)
            return await asyncio.wait_for(
                self.llm.generate_text(prompt, purpose="chat", system_prompt=CHAT_SYSTEM_PROMPT),
                timeout=settings.LLM_TIMEOUT_SECONDS,
            )
        except Exception as e:
            logger.error("Chat AI error: %s", e or type(e).__name__)
            return CHAT_ERROR_REPLY

    async def delete_chat(self, marketer_id: str, chat_id: str) -> None:
        chat = await self.get_owned_chat(marketer_id, chat_id)

        db = mongodb.get_database()
        deleted = await db.chat_messages.delete_many({"chat_id": chat.id})
        await db.chats.delete_one({"_id": to_object_id(chat.id)})
        logger.info("Deleted chat %s with %s messages", chat.id, deleted.deleted_count)

    async def _save_message(self, chat_id: str, content: str, sender: ChatSender) -> ChatMessage:
        db = mongodb.get_database()
        message = ChatMessage(chat_id=chat_id, content=content, sender=sender)
        result = await db.chat_messages.insert_one(message.model_dump(exclude={"id"}))
        message.id = str(result.inserted_id)
        return message


chat_service = ChatService()
