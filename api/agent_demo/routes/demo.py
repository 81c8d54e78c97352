"""
Demo user routes: browse published agents and chat with them.

Demo users are identified by ``derive_demo_user_id``; starting a chat issues the
``demo_session`` cookie that identity is derived from. Every session operation
is scoped to that identity.
"""

import logging
from typing import List

from agent_demo.core.security import derive_demo_user_id, ensure_demo_user_id
from agent_demo.models.catalog import Agent, DomainWithAgents
from agent_demo.models.chat import (
    ChatHistoryResponse,
    ChatMessageRequest,
    ChatReply,
    ChatSessionListResponse,
    ChatStartResponse,
)
from agent_demo.routes.dependencies import get_chat_service
from agent_demo.services.chat_service import ChatService
from fastapi import APIRouter, Depends, status

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/demo", tags=["Demo"])


@router.get("/domains", response_model=List[DomainWithAgents])
async def list_published_domains(service: ChatService = Depends(get_chat_service)):
    """Active domains with their Final agents; domains without any are omitted."""
    return service.list_published_domains()


@router.get("/agents/{agent_id}", response_model=Agent)
async def get_published_agent(
    agent_id: str, service: ChatService = Depends(get_chat_service)
):
    return service.get_published_agent(agent_id)


@router.post(
    "/agents/{agent_id}/chat/start",
    response_model=ChatStartResponse,
    status_code=status.HTTP_201_CREATED,
)
async def start_chat(
    agent_id: str,
    user_id: str = Depends(ensure_demo_user_id),
    service: ChatService = Depends(get_chat_service),
):
    return service.start_chat(user_id, agent_id)


@router.post("/chat/{session_id}/message", response_model=ChatReply)
async def send_message(
    session_id: str,
    request: ChatMessageRequest,
    user_id: str = Depends(derive_demo_user_id),
    service: ChatService = Depends(get_chat_service),
):
    """Send one message and receive the agent's reply (or a fallback)."""
    return service.send_message(user_id, session_id, request.message)


@router.get("/chat/{session_id}/history", response_model=ChatHistoryResponse)
async def get_history(
    session_id: str,
    user_id: str = Depends(derive_demo_user_id),
    service: ChatService = Depends(get_chat_service),
):
    """The most recent messages of the session in chronological order."""
    return service.get_history(user_id, session_id)


@router.post("/chat/{session_id}/end")
async def end_chat(
    session_id: str,
    user_id: str = Depends(derive_demo_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.end_chat(user_id, session_id)
    return {"message": "Chat session ended", "session_id": session_id}


@router.get("/chat/sessions", response_model=ChatSessionListResponse)
async def list_sessions(
    user_id: str = Depends(derive_demo_user_id),
    service: ChatService = Depends(get_chat_service),
):
    return service.list_sessions(user_id)
