from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from tutorlink.cores.input_validator import sanitize_string_field


class MessageCreate(BaseModel):
    receiver_id: int
    content: str = Field(..., max_length=2000)

    _sanitize_content = field_validator('content')(sanitize_string_field)


class ChatUser(BaseModel):
    id: int
    name: str
    image: Optional[str] = None
    role: Optional[str] = None


class MessageData(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    is_read: bool
    created_at: datetime


class MessageResponse(BaseModel):
    success: bool
    message: str
    data: MessageData


class MessageListResponse(BaseModel):
    success: bool
    message: str
    data: List[MessageData]


class ConversationData(BaseModel):
    user: ChatUser
    last_message: MessageData
    unread_count: int


class ConversationListResponse(BaseModel):
    success: bool
    message: str
    data: List[ConversationData]
