"""
Chat endpoints for API v1.

The chat partner is addressed by username in every path.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from support_network_api.app.core.security import get_current_user
from support_network_api.app.schemas.chat import ChatRead, MessageCreate, MessageRead
from support_network_api.app.services.chat_service import ChatService
from support_network_api.app.services.user_service import UserService


router = APIRouter()


@router.get("", response_model=List[ChatRead])
async def get_chats(current_user: dict = Depends(get_current_user)) -> List[ChatRead]:
    return await ChatService.get_chats(current_user["user_id"])


@router.get("/{chatter}", response_model=List[MessageRead])
async def get_chat_messages(chatter: str, current_user: dict = Depends(get_current_user)) -> List[MessageRead]:
    chatter_id = (await UserService.get_user_by_username(chatter)).id
    return await ChatService.get_chat_messages(current_user["user_id"], chatter_id)


@router.post("/{chatter}", status_code=status.HTTP_201_CREATED)
async def start_chat(chatter: str, current_user: dict = Depends(get_current_user)) -> dict:
    chatter_id = (await UserService.get_user_by_username(chatter)).id
    chat = await ChatService.start_chat(current_user["user_id"], chatter_id)
    return {"msg": "Chat started!", "chat": chat}


@router.post("/{chatter}/messages", status_code=status.HTTP_201_CREATED)
async def send_message(
    chatter: str,
    body: MessageCreate,
    current_user: dict = Depends(get_current_user),
) -> dict:
    chatter_id = (await UserService.get_user_by_username(chatter)).id
    message = await ChatService.send_message(chatter_id, current_user["user_id"], body.content)
    return {"msg": "Message sent!", "message": message}
