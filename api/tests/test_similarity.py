"""Tests for the word-overlap similarity score."""

import pytest
from agent_demo.services.matching.similarity import score


class TestScore:
    def test_identical_text_scores_one(self):
        assert score("What is your return policy?", "What is your return policy?") == 1.0

    def test_empty_side_scores_zero(self):
        assert score("", "What is your return policy?") == 0.0
        assert score("return policy", "") == 0.0
        # Only short tokens normalize to nothing
        assert score("a an of", "return policy") == 0.0

    def test_substring_overlap_counts_in_both_directions(self):
        # "what's" contains "what"; "policy" is inside "policy?"
        result = score("what's the return policy", "What is your return policy?")
        assert result == pytest.approx(3 / 4)

    def test_disjoint_text_scores_zero(self):
        assert score("tell me about quantum computing", "What is your return policy?") == 0.0

    def test_duplicates_do_not_inflate_score(self):
        assert score("refund refund refund", "refund window") == pytest.approx(1 / 2)

    def test_divides_by_larger_token_set(self):
        result = score("shipping", "shipping costs for international orders")
        assert result == pytest.approx(1 / 5)

    @pytest.mark.parametrize(
        "utterance,candidate",
        [
            ("how do I change my password", "How do I reset my password?"),
            ("<b>billing</b> address update", "Update the billing address"),
            ("xyz", "xyzxyz abc abcd"),
        ],
    )
    def test_stays_within_unit_interval(self, utterance, candidate):
        assert 0.0 <= score(utterance, candidate) <= 1.0
