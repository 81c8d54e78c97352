"""
Chat service for demo users.

A chat turn stores the user's message, asks the answer matcher for a reply and
stores that reply. Sessions are private to the user who started them: a session
id belonging to someone else behaves exactly like an unknown one.
"""

import logging
from typing import Dict, List, Optional

from agent_demo.core.exceptions import AgentNotFoundError, ChatSessionNotFoundError
from agent_demo.models.catalog import Agent, DomainWithAgents
from agent_demo.models.chat import (
    ChatHistoryResponse,
    ChatReply,
    ChatSession,
    ChatSessionListResponse,
    ChatStartResponse,
)
from agent_demo.services.catalog.catalog_repository import CatalogRepository
from agent_demo.services.chat.chat_repository import ChatRepository
from agent_demo.services.matching.answer_matcher import AnswerMatcher
from agent_demo.utils.logging import redact_pii

logger = logging.getLogger(__name__)


class ChatService:
    def __init__(
        self,
        chat_repository: ChatRepository,
        catalog_repository: CatalogRepository,
        matcher: AnswerMatcher,
        history_limit: int = 10,
        session_list_limit: int = 20,
    ):
        self.chat_repository = chat_repository
        self.catalog_repository = catalog_repository
        self.matcher = matcher
        self.history_limit = history_limit
        self.session_list_limit = session_list_limit

    def _owned_session(
        self, user_id: str, session_id: str, active_only: bool = False
    ) -> ChatSession:
        session = self.chat_repository.get_session(session_id)
        if session is None or session.user_id != user_id:
            raise ChatSessionNotFoundError(session_id)
        if active_only and not session.is_active:
            raise ChatSessionNotFoundError(session_id)
        return session

    def list_published_domains(self) -> List[DomainWithAgents]:
        return self.catalog_repository.list_published_domains()

    def get_published_agent(self, agent_id: str) -> Agent:
        agent = self.catalog_repository.get_published_agent(agent_id)
        if agent is None:
            raise AgentNotFoundError(agent_id)
        return agent

    def start_chat(self, user_id: str, agent_id: str) -> ChatStartResponse:
        """Open a fresh session with a published agent.

        Earlier active sessions of the same user with the same agent are ended,
        and the agent's access counter goes up by one.

        Raises:
            AgentNotFoundError: If the agent does not exist or is not Final
        """
        agent = self.get_published_agent(agent_id)
        session = self.chat_repository.start_session(user_id, agent_id)
        self.catalog_repository.increment_access_count(agent_id)
        logger.info(f"Started chat session {session.id} with agent {agent_id}")

        session.agent_name = agent.name
        session.domain_name = agent.domain_name
        return ChatStartResponse(
            session=session,
            agent_name=agent.name,
            domain_name=agent.domain_name or "",
        )

    def send_message(self, user_id: str, session_id: str, text: str) -> ChatReply:
        """Store a user message and the matched agent reply.

        Raises:
            ChatSessionNotFoundError: If the session is unknown, ended, or not the user's
        """
        session = self._owned_session(user_id, session_id, active_only=True)
        logger.info(f"Chat message in session {session_id}: {redact_pii(text)}")

        user_message = self.chat_repository.add_message(session_id, "user", text)
        result = self.matcher.match(session.agent_id, text)
        agent_reply = self.chat_repository.add_message(
            session_id,
            "agent",
            result.text,
            html=result.html,
            question_id=result.question_id,
            answer_id=result.answer_id,
        )
        return ChatReply(
            user_message=user_message, agent_reply=agent_reply, score=result.score
        )

    def get_history(self, user_id: str, session_id: str) -> ChatHistoryResponse:
        self._owned_session(user_id, session_id)
        messages = self.chat_repository.recent_messages(session_id, self.history_limit)
        return ChatHistoryResponse(session_id=session_id, messages=messages)

    def end_chat(self, user_id: str, session_id: str) -> None:
        self._owned_session(user_id, session_id, active_only=True)
        self.chat_repository.end_session(session_id)
        logger.info(f"Ended chat session {session_id}")

    def list_sessions(self, user_id: str) -> ChatSessionListResponse:
        """The user's most recent sessions, labelled with agent and domain names."""
        sessions = self.chat_repository.list_sessions(user_id, self.session_list_limit)
        agents: Dict[str, Optional[Agent]] = {}
        for session in sessions:
            if session.agent_id not in agents:
                agents[session.agent_id] = self.catalog_repository.get_agent(
                    session.agent_id
                )
            agent = agents[session.agent_id]
            if agent is not None:
                session.agent_name = agent.name
                session.domain_name = agent.domain_name
        return ChatSessionListResponse(sessions=sessions, total_count=len(sessions))
