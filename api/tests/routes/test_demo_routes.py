"""Tests for the demo browsing and chat endpoints."""

import pytest
from agent_demo.services.matching.answer_matcher import NO_MATCH_TEXT
from fastapi.testclient import TestClient


@pytest.fixture
def second_visitor(test_client):
    """A client with its own cookie jar, sharing the running app and headers."""
    return TestClient(test_client.app)


@pytest.fixture
def published(test_client, admin_headers):
    """A Final agent with one Final question, created through the admin API."""
    domain = test_client.post(
        "/admin/domains", json={"name": "Retail"}, headers=admin_headers
    ).json()
    draft_domain = test_client.post(
        "/admin/domains", json={"name": "Lab"}, headers=admin_headers
    ).json()
    agent = test_client.post(
        "/admin/agents",
        json={
            "domain_id": domain["id"],
            "name": "Store Helper",
            "environment": "Custom",
            "version": "3.2",
            "developed_by": "Support Team",
            "status": "Final",
        },
        headers=admin_headers,
    ).json()
    draft_agent = test_client.post(
        "/admin/agents",
        json={
            "domain_id": draft_domain["id"],
            "name": "Prototype",
            "environment": "Other",
            "version": "0.1",
            "developed_by": "Lab",
        },
        headers=admin_headers,
    ).json()
    question = test_client.post(
        f"/admin/agents/{agent['id']}/questions",
        json={
            "question_text": "What is your return policy?",
            "answer_text": "Items can be returned within 30 days.",
        },
        headers=admin_headers,
    ).json()
    test_client.put(
        f"/admin/questions/{question['id']}/status",
        json={"status": "Final"},
        headers=admin_headers,
    )
    return {"agent": agent, "draft_agent": draft_agent, "question": question}


def _start(test_client, agent_id, headers=None) -> str:
    response = test_client.post(f"/demo/agents/{agent_id}/chat/start", headers=headers)
    assert response.status_code == 201
    return response.json()["session"]["id"]


class TestBrowsing:
    def test_only_published_agents_are_listed(self, test_client, published):
        response = test_client.get("/demo/domains")
        assert response.status_code == 200
        domains = response.json()
        assert [d["name"] for d in domains] == ["Retail"]
        assert [a["name"] for a in domains[0]["agents"]] == ["Store Helper"]

    def test_draft_agent_is_404(self, test_client, published):
        response = test_client.get(f"/demo/agents/{published['draft_agent']['id']}")
        assert response.status_code == 404

    def test_published_agent_details(self, test_client, published):
        response = test_client.get(f"/demo/agents/{published['agent']['id']}")
        assert response.json()["domain_name"] == "Retail"


class TestChat:
    def test_conversation_round_trip(self, test_client, published):
        session_id = _start(test_client, published["agent"]["id"])

        response = test_client.post(
            f"/demo/chat/{session_id}/message",
            json={"message": "What is your return policy?"},
        )
        assert response.status_code == 200
        reply = response.json()
        assert reply["agent_reply"]["text"] == "Items can be returned within 30 days."
        assert reply["agent_reply"]["question_id"] == published["question"]["id"]

        response = test_client.post(
            f"/demo/chat/{session_id}/message",
            json={"message": "xylophone zebra quantum"},
        )
        assert response.json()["agent_reply"]["text"] == NO_MATCH_TEXT

        history = test_client.get(f"/demo/chat/{session_id}/history").json()
        assert [m["message_type"] for m in history["messages"]] == [
            "user",
            "agent",
            "user",
            "agent",
        ]

    def test_empty_message_is_422(self, test_client, published):
        session_id = _start(test_client, published["agent"]["id"])
        response = test_client.post(f"/demo/chat/{session_id}/message", json={"message": ""})
        assert response.status_code == 422

    def test_end_then_message_is_404(self, test_client, published):
        session_id = _start(test_client, published["agent"]["id"])

        response = test_client.post(f"/demo/chat/{session_id}/end")
        assert response.json() == {"message": "Chat session ended", "session_id": session_id}

        response = test_client.post(
            f"/demo/chat/{session_id}/message", json={"message": "still there?"}
        )
        assert response.status_code == 404

    def test_sessions_are_private(self, test_client, second_visitor, published):
        session_id = _start(test_client, published["agent"]["id"])

        response = second_visitor.get(f"/demo/chat/{session_id}/history")
        assert response.status_code == 404
        assert second_visitor.get("/demo/chat/sessions").json()["total_count"] == 0

        listing = test_client.get("/demo/chat/sessions").json()
        assert listing["sessions"][0]["id"] == session_id
        assert listing["sessions"][0]["agent_name"] == "Store Helper"

    def test_start_issues_demo_session_cookie(self, test_client, published):
        response = test_client.post(f"/demo/agents/{published['agent']['id']}/chat/start")

        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("demo_session=")
        assert "httponly" in set_cookie.lower()
        assert test_client.cookies.get("demo_session")

    def test_existing_cookie_is_kept(self, test_client, published):
        _start(test_client, published["agent"]["id"])
        token = test_client.cookies.get("demo_session")

        response = test_client.post(f"/demo/agents/{published['agent']['id']}/chat/start")

        assert "set-cookie" not in response.headers
        assert test_client.cookies.get("demo_session") == token

    def test_visitors_sharing_address_and_browser_are_separate(
        self, test_client, second_visitor, published
    ):
        agent_id = published["agent"]["id"]
        mine = _start(test_client, agent_id)
        theirs = _start(second_visitor, agent_id)

        my_sessions = test_client.get("/demo/chat/sessions").json()["sessions"]
        their_sessions = second_visitor.get("/demo/chat/sessions").json()["sessions"]
        assert [s["id"] for s in my_sessions] == [mine]
        assert [s["id"] for s in their_sessions] == [theirs]
        assert my_sessions[0]["is_active"]

    def test_start_with_draft_agent_is_404(self, test_client, published):
        response = test_client.post(
            f"/demo/agents/{published['draft_agent']['id']}/chat/start"
        )
        assert response.status_code == 404
