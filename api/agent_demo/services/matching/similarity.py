"""
Word-overlap similarity between a user utterance and a stored text.
"""

from typing import List

from agent_demo.services.matching.text_normalizer import normalize


def _token_set(raw: str) -> List[str]:
    # Order-preserving de-duplication
    return list(dict.fromkeys(normalize(raw)))


def score(utterance: str, candidate_text: str) -> float:
    """Score how much of the utterance overlaps the candidate.

    An utterance token counts as matched when some candidate token is a
    substring of it or it is a substring of that token. The matched count is
    divided by the larger of the two token-set sizes, so the result is always
    within [0, 1]. Empty input on either side scores 0.

    This is a ranking heuristic, not a metric: it is not symmetric.
    """
    utterance_tokens = _token_set(utterance)
    candidate_tokens = _token_set(candidate_text)
    if not utterance_tokens or not candidate_tokens:
        return 0.0

    matched = sum(
        1
        for word in utterance_tokens
        if any(word in other or other in word for other in candidate_tokens)
    )
    return matched / max(len(utterance_tokens), len(candidate_tokens))
