"""Tests for demo chat sessions and matched replies."""

import pytest
from agent_demo.core.exceptions import AgentNotFoundError, ChatSessionNotFoundError
from agent_demo.services.matching.answer_matcher import NO_MATCH_TEXT

USER = "user_aaaaaaaaaaaaaaaaaaaaaaaa"
OTHER_USER = "user_bbbbbbbbbbbbbbbbbbbbbbbb"


@pytest.fixture
def return_policy(catalog_repo, published_agent):
    """A Final question without variants, so matching is fully deterministic."""
    question = catalog_repo.create_question_with_variants(
        published_agent.id,
        "What is your return policy?",
        "Returns are accepted within 30 days.",
        "<p>Returns are accepted within <b>30 days</b>.</p>",
        [],
        [],
    )
    catalog_repo.set_question_status(question.id, "Final")
    return question


class TestStartChat:
    def test_start_counts_access_and_labels_session(
        self, chat_service, catalog_repo, published_agent
    ):
        started = chat_service.start_chat(USER, published_agent.id)

        assert started.agent_name == "Store Helper"
        assert started.domain_name == "Retail"
        assert started.session.is_active
        assert catalog_repo.get_agent(published_agent.id).access_count == 1

    def test_restart_ends_previous_session(self, chat_service, published_agent):
        first = chat_service.start_chat(USER, published_agent.id)
        second = chat_service.start_chat(USER, published_agent.id)

        sessions = {s.id: s for s in chat_service.list_sessions(USER).sessions}
        assert sessions[first.session.id].is_active is False
        assert sessions[first.session.id].ended_at is not None
        assert sessions[second.session.id].is_active is True

    def test_other_users_sessions_stay_open(self, chat_service, published_agent):
        mine = chat_service.start_chat(USER, published_agent.id)
        chat_service.start_chat(OTHER_USER, published_agent.id)

        (session,) = chat_service.list_sessions(USER).sessions
        assert session.id == mine.session.id
        assert session.is_active

    def test_draft_agent_is_not_found(self, chat_service, catalog_service, published_agent):
        catalog_service.update_agent_status(published_agent.id, "Draft")
        with pytest.raises(AgentNotFoundError):
            chat_service.start_chat(USER, published_agent.id)

    def test_unknown_agent(self, chat_service):
        with pytest.raises(AgentNotFoundError):
            chat_service.start_chat(USER, "missing")


class TestSendMessage:
    def test_matching_question_replies_with_answer(
        self, chat_service, published_agent, return_policy
    ):
        session_id = chat_service.start_chat(USER, published_agent.id).session.id

        reply = chat_service.send_message(USER, session_id, "what's the return policy")

        assert reply.user_message.message_type == "user"
        assert reply.agent_reply.message_type == "agent"
        assert reply.agent_reply.text == "Returns are accepted within 30 days."
        assert reply.agent_reply.html == "<p>Returns are accepted within <b>30 days</b>.</p>"
        assert reply.agent_reply.question_id == return_policy.id
        assert reply.score == pytest.approx(0.75)

    def test_unrelated_message_gets_fallback(
        self, chat_service, published_agent, return_policy
    ):
        session_id = chat_service.start_chat(USER, published_agent.id).session.id

        reply = chat_service.send_message(USER, session_id, "tell me about quantum computing")

        assert reply.agent_reply.text == NO_MATCH_TEXT
        assert reply.agent_reply.question_id is None

    def test_draft_question_is_never_served(
        self, chat_service, catalog_repo, published_agent, return_policy
    ):
        catalog_repo.set_question_status(return_policy.id, "Draft")
        session_id = chat_service.start_chat(USER, published_agent.id).session.id

        reply = chat_service.send_message(USER, session_id, "What is your return policy?")
        assert reply.agent_reply.text == NO_MATCH_TEXT

    def test_ended_session_rejects_messages(self, chat_service, published_agent):
        session_id = chat_service.start_chat(USER, published_agent.id).session.id
        chat_service.end_chat(USER, session_id)

        with pytest.raises(ChatSessionNotFoundError):
            chat_service.send_message(USER, session_id, "hello there")

    def test_foreign_session_looks_unknown(self, chat_service, published_agent):
        session_id = chat_service.start_chat(USER, published_agent.id).session.id

        with pytest.raises(ChatSessionNotFoundError):
            chat_service.send_message(OTHER_USER, session_id, "hello there")
        with pytest.raises(ChatSessionNotFoundError):
            chat_service.get_history(OTHER_USER, session_id)
        with pytest.raises(ChatSessionNotFoundError):
            chat_service.end_chat(OTHER_USER, session_id)


class TestHistory:
    def test_history_is_last_ten_in_order(self, chat_service, published_agent):
        session_id = chat_service.start_chat(USER, published_agent.id).session.id
        for i in range(1, 7):
            chat_service.send_message(USER, session_id, f"message {i}")

        history = chat_service.get_history(USER, session_id)

        assert len(history.messages) == 10
        assert history.messages[0].text == "message 2"
        assert [m.message_type for m in history.messages[:2]] == ["user", "agent"]
        assert history.messages[-1].message_type == "agent"

    def test_ended_session_history_is_readable(self, chat_service, published_agent):
        session_id = chat_service.start_chat(USER, published_agent.id).session.id
        chat_service.send_message(USER, session_id, "hello there")
        chat_service.end_chat(USER, session_id)

        assert len(chat_service.get_history(USER, session_id).messages) == 2

    def test_session_list_is_capped(self, chat_service, published_agent):
        for _ in range(21):
            chat_service.start_chat(USER, published_agent.id)

        listing = chat_service.list_sessions(USER)

        assert listing.total_count == 20
        assert listing.sessions[0].is_active
        assert all(s.agent_name == "Store Helper" for s in listing.sessions)
