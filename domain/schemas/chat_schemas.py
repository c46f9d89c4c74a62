from pydantic import BaseModel, Field
from typing import List
from datetime import datetime

from domain.enums import ChatRole


class ChatMessage(BaseModel):
    """One entry of the assistant transcript"""

    role: ChatRole
    content: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    is_error: bool = False


class ChatSendRequest(BaseModel):
    message: str = Field(..., max_length=2000)


class ChatTranscript(BaseModel):
    messages: List[ChatMessage]
    is_loading: bool = False
