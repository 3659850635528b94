"""
API endpoints for the marketer chat assistant
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from adventure.api.dependencies import get_current_marketer
from adventure.models.chat import Chat, ChatMessage
from adventure.models.user import User
from adventure.services.chat_service import chat_service

router = APIRouter()


class ChatCreate(BaseModel):
    title: Optional[str] = None


class MessageCreate(BaseModel):
    content: Optional[str] = None


class MessageExchangeResponse(BaseModel):
    user_message: ChatMessage
    ai_message: ChatMessage


@router.post("/create", response_model=Chat, status_code=status.HTTP_201_CREATED)
async def create_chat(request: ChatCreate, current_user: User = Depends(get_current_marketer)):
    return await chat_service.create_chat(current_user.id, request.title)


@router.get("/my-chats", response_model=List[Chat])
async def get_my_chats(current_user: User = Depends(get_current_marketer)):
    return await chat_service.get_chats(current_user.id)


@router.get("/{chat_id}/messages", response_model=List[ChatMessage])
async def get_chat_messages(chat_id: str, current_user: User = Depends(get_current_marketer)):
    """Get chat messages, oldest first"""
    return await chat_service.get_messages(current_user.id, chat_id)


@router.post("/{chat_id}/message", response_model=MessageExchangeResponse)
async def send_message(chat_id: str, request: MessageCreate, current_user: User = Depends(get_current_marketer)):
    """Send a message and get the assistant's reply"""
    user_message, ai_message = await chat_service.send_message(current_user.id, chat_id, request.content)
    return MessageExchangeResponse(user_message=user_message, ai_message=ai_message)


@router.delete("/{chat_id}")
async def delete_chat(chat_id: str, current_user: User = Depends(get_current_marketer)):
    await chat_service.delete_chat(current_user.id, chat_id)
    return {"message": "Chat deleted successfully"}
