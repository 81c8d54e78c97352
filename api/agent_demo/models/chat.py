from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class ChatSession(BaseModel):
    id: str
    user_id: str
    agent_id: str
    agent_name: Optional[str] = None  # Joined from the catalog for listings
    domain_name: Optional[str] = None
    started_at: datetime
    ended_at: Optional[datetime] = None
    is_active: bool = True


class ChatMessage(BaseModel):
    id: str
    session_id: str
    message_type: Literal["user", "agent"]
    text: str
    html: Optional[str] = None
    question_id: Optional[str] = None
    answer_id: Optional[str] = None
    created_at: datetime


class ChatMessageRequest(BaseModel):
    """A demo user's chat message."""

    message: str = Field(min_length=1, max_length=2000)

    @field_validator("message")
    @classmethod
    def sanitize_message(cls, v: str) -> str:
        """Remove null bytes and reject whitespace-only messages."""
        v = v.replace("\x00", "").strip()
        if not v:
            raise ValueError("Message cannot be empty")
        return v


class ChatReply(BaseModel):
    """The stored user message and the agent reply chosen by the matcher."""

    user_message: ChatMessage
    agent_reply: ChatMessage
    score: float = Field(ge=0.0, le=1.0)


class ChatStartResponse(BaseModel):
    session: ChatSession
    agent_name: str
    domain_name: str


class ChatHistoryResponse(BaseModel):
    session_id: str
    messages: List[ChatMessage]


class ChatSessionListResponse(BaseModel):
    sessions: List[ChatSession]
    total_count: int = Field(ge=0)
