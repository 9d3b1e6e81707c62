import logging
from typing import Dict, List

from fastapi import HTTPException
from sqlalchemy import or_, and_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from tutorlink.models import Message, User
from tutorlink.schemas.chat.message_schema import MessageCreate
from tutorlink.services.validation.exception import handle_db_errors

logger = logging.getLogger(__name__)


def message_to_dict(message: Message) -> dict:
    return {
        "id": message.id,
        "sender_id": message.sender_id,
        "receiver_id": message.receiver_id,
        "content": message.content,
        "is_read": message.is_read,
        "created_at": message.created_at,
    }


def chat_user(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.full_name,
        "image": user.image,
        "role": user.role.name if user.role else None,
    }


@handle_db_errors
async def send_message(db: AsyncSession, sender_id: int, data: MessageCreate) -> dict:
    if not data.content:
        raise HTTPException(status_code=400, detail="El mensaje no puede estar vacío")
    if data.receiver_id == sender_id:
        raise HTTPException(status_code=400, detail="No puedes enviarte mensajes a ti mismo")

    receiver = await db.get(User, data.receiver_id)
    if not receiver or not receiver.is_active:
        raise HTTPException(status_code=404, detail="Destinatario no encontrado")

    message = Message(sender_id=sender_id, receiver_id=data.receiver_id, content=data.content)
    db.add(message)
    await db.commit()
    logger.info(f"Mensaje {message.id} de {sender_id} a {data.receiver_id}")
    return message_to_dict(message)


@handle_db_errors
async def get_thread(db: AsyncSession, user_id: int, other_user_id: int) -> List[dict]:
    """Mensajes entre ambos usuarios, del más antiguo al más reciente; marca como leídos los recibidos."""
    other = await db.get(User, other_user_id)
    if not other:
        raise HTTPException(status_code=404, detail="Usuario no encontrado")

    await db.execute(
        update(Message)
        .where(Message.sender_id == other_user_id, Message.receiver_id == user_id, Message.is_read == False)  # noqa: E712
        .values(is_read=True)
    )
    await db.commit()

    result = await db.execute(
        select(Message)
        .where(or_(
            and_(Message.sender_id == user_id, Message.receiver_id == other_user_id),
            and_(Message.sender_id == other_user_id, Message.receiver_id == user_id),
        ))
        .order_by(Message.created_at, Message.id)
        .execution_options(populate_existing=True)
    )
    return [message_to_dict(m) for m in result.scalars().all()]


@handle_db_errors
async def list_conversations(db: AsyncSession, user_id: int) -> List[dict]:
    result = await db.execute(
        select(Message)
        .where(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
        .order_by(Message.created_at.desc(), Message.id.desc())
    )

    conversations: Dict[int, dict] = {}
    for message in result.scalars().all():
        other = message.receiver if message.sender_id == user_id else message.sender
        entry = conversations.get(other.id)
        if entry is None:
            entry = {"user": chat_user(other), "last_message": message_to_dict(message), "unread_count": 0}
            conversations[other.id] = entry
        if message.receiver_id == user_id and not message.is_read:
            entry["unread_count"] += 1

    return list(conversations.values())
