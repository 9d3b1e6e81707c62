from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutorlink.apis.deps import auth_required, get_db
from tutorlink.schemas.chat.message_schema import (
    ConversationListResponse, MessageCreate, MessageListResponse, MessageResponse
)
from tutorlink.services.chat.message_service import get_thread, list_conversations, send_message

router = APIRouter()


@router.post("/", response_model=MessageResponse, status_code=201)
async def send_message_route(
    data: MessageCreate,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(auth_required)
):
    message = await send_message(db, user_data["user_id"], data)
    return {"success": True, "message": "Mensaje enviado", "data": message}


# Declarada antes de /{other_user_id} para que "conversations" no se interprete como id
@router.get("/conversations/", response_model=ConversationListResponse)
async def get_conversations(db: AsyncSession = Depends(get_db), user_data: dict = Depends(auth_required)):
    conversations = await list_conversations(db, user_data["user_id"])
    return {"success": True, "message": "Conversaciones obtenidas exitosamente", "data": conversations}


@router.get("/{other_user_id}", response_model=MessageListResponse)
async def get_messages(
    other_user_id: int,
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(auth_required)
):
    messages = await get_thread(db, user_data["user_id"], other_user_id)
    return {"success": True, "message": "Mensajes obtenidos exitosamente", "data": messages}
