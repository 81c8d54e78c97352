"""Tests for HTML stripping and similarity tokenization."""

from agent_demo.services.matching.text_normalizer import normalize, strip_html


class TestStripHtml:
    def test_removes_tags_and_trims(self):
        assert strip_html("  <p>Hello <b>world</b></p>  ") == "Hello world"

    def test_empty_input(self):
        assert strip_html("") == ""

    def test_unclosed_angle_bracket_is_kept(self):
        # Only complete <...> spans are tags
        assert strip_html("a < b") == "a < b"


class TestNormalize:
    def test_lowercases_and_drops_short_tokens(self):
        assert normalize("How do I reset my password?") == [
            "how",
            "reset",
            "password?",
        ]

    def test_strips_html_before_tokenizing(self):
        assert normalize("<p>Return <em>policy</em></p>") == ["return", "policy"]

    def test_empty_and_whitespace_input(self):
        assert normalize("") == []
        assert normalize("   \n\t ") == []

    def test_keeps_punctuation_attached(self):
        assert normalize("what's the deal") == ["what's", "the", "deal"]

    def test_is_idempotent_on_its_tokens(self):
        tokens = normalize("<div>Where can I FIND the Billing settings?</div>")
        assert normalize(" ".join(tokens)) == tokens

    def test_returns_a_fresh_list_each_call(self):
        first = normalize("shipping times")
        first.append("mutated")
        assert normalize("shipping times") == ["shipping", "times"]
