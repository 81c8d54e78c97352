"""Tests for demo identity derivation and log redaction."""

from types import SimpleNamespace

import pytest
from agent_demo.core.security import derive_demo_user_id, ensure_demo_user_id
from agent_demo.utils.logging import redact_pii
from fastapi import Response


def _request(cookies=None, headers=None, host="10.0.0.5"):
    return SimpleNamespace(
        cookies=cookies or {},
        headers=headers or {},
        client=SimpleNamespace(host=host),
    )


class TestDemoIdentity:
    def test_same_client_gets_same_identity(self):
        headers = {"user-agent": "Firefox"}
        first = derive_demo_user_id(_request(headers=headers))
        second = derive_demo_user_id(_request(headers=headers))
        assert first == second
        assert first.startswith("user_")
        assert len(first) == len("user_") + 24

    def test_user_agent_changes_identity(self):
        assert derive_demo_user_id(
            _request(headers={"user-agent": "Firefox"})
        ) != derive_demo_user_id(_request(headers={"user-agent": "Safari"}))

    def test_session_cookie_wins_over_headers(self):
        cookies = {"demo_session": "abc123"}
        assert derive_demo_user_id(
            _request(cookies=cookies, headers={"user-agent": "Firefox"})
        ) == derive_demo_user_id(_request(cookies=cookies, host="192.168.1.1"))

    def test_raw_cookie_is_not_exposed(self):
        user_id = derive_demo_user_id(_request(cookies={"demo_session": "secret-token"}))
        assert "secret-token" not in user_id

    def test_cookie_is_issued_when_missing(self):
        response = Response()
        user_id = ensure_demo_user_id(_request(headers={"user-agent": "Firefox"}), response)

        cookie = response.headers["set-cookie"]
        token = cookie.split(";", 1)[0].split("=", 1)[1]
        assert cookie.startswith("demo_session=")
        assert user_id == derive_demo_user_id(_request(cookies={"demo_session": token}))
        assert user_id != derive_demo_user_id(_request(headers={"user-agent": "Firefox"}))

    def test_existing_cookie_is_reused(self):
        response = Response()
        request = _request(cookies={"demo_session": "abc123"})

        assert ensure_demo_user_id(request, response) == derive_demo_user_id(request)
        assert "set-cookie" not in response.headers


class TestRedactPii:
    @pytest.mark.parametrize(
        "text, placeholder",
        [
            ("mail me at jane.doe@example.com", "[EMAIL]"),
            ("my card is 4111 1111 1111 1111", "[CARD]"),
            ("call 555-123-4567 tomorrow", "[PHONE]"),
            ("server 192.168.0.12 is down", "[IP]"),
            ("order 98765432 never arrived", "[NUMBER]"),
        ],
    )
    def test_sensitive_values_are_replaced(self, text, placeholder):
        redacted = redact_pii(text)
        assert placeholder in redacted

    def test_plain_text_is_untouched(self):
        assert redact_pii("what's the return policy") == "what's the return policy"

    def test_empty_text(self):
        assert redact_pii("") == ""
